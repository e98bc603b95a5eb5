"""
Curated catalogue of models from the Ollama library
"""


def _entry(name, description, size, parameter_size, family, quantization='Q4_K_M'):
    return {
        'name': name,
        'description': description,
        'size': size,
        'details': {
            'parameter_size': parameter_size,
            'quantization_level': quantization,
            'format': 'gguf',
            'family': family,
        },
    }


BUILTIN_ONLINE_MODELS = [
    _entry('llama3:8b', "Meta's latest 8 billion parameter model", '4.7 GB', '8B', 'llama'),
    _entry('llama3:70b', "Meta's powerful 70 billion parameter model", '34.4 GB', '70B', 'llama'),
    _entry('mistral:7b', "Mistral AI's 7 billion parameter model", '4.1 GB', '7B', 'transformer', 'Q5_K_M'),
    _entry('mistral:7b-instruct', "Mistral AI's 7 billion parameter instruction-tuned model", '4.1 GB', '7B',
           'transformer', 'Q5_K_M'),
    _entry('gemma:2b', "Google's lightweight 2 billion parameter model", '1.4 GB', '2B', 'gemma'),
    _entry('gemma:7b', "Google's 7 billion parameter model", '4.2 GB', '7B', 'gemma'),
    _entry('qwen2:0.5b', 'Alibaba Tongyi Qianwen 0.5B model', '0.3 GB', '0.5B', 'qwen'),
    _entry('qwen2:1.5b', 'Alibaba Tongyi Qianwen 1.5B model', '0.9 GB', '1.5B', 'qwen'),
    _entry('qwen2:7b', 'Alibaba Tongyi Qianwen 7B model', '4.3 GB', '7B', 'qwen'),
    _entry('qwen2:72b', 'Alibaba Tongyi Qianwen 72B model', '35.1 GB', '72B', 'qwen'),
    _entry('phi3:mini', 'Microsoft lightweight 3.8B parameter model', '2.3 GB', '3.8B', 'phi'),
    _entry('phi3:small', 'Microsoft 7B parameter model', '4.1 GB', '7B', 'phi'),
    _entry('phi3:medium', 'Microsoft 14B parameter model', '8.3 GB', '14B', 'phi'),
    _entry('llava:1.5-7b', 'Multimodal vision-language model', '4.5 GB', '7B', 'llava'),
    _entry('codellama:7b', 'Model tuned for code generation', '4.2 GB', '7B', 'llama'),
    _entry('codellama:13b', '13B parameter model tuned for code generation', '7.8 GB', '13B', 'llama'),
    _entry('starling-lm:7b-alpha', 'High performance language model', '4.1 GB', '7B', 'llama'),
    _entry('deepseek-coder:6.7b-base', 'Model tuned for code generation', '4.0 GB', '6.7B', 'deepseek'),
    _entry('deepseek-coder:6.7b-instruct', 'Instruction model tuned for code generation', '4.0 GB', '6.7B',
           'deepseek'),
]
