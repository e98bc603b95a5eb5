from .dashboard_app import main

main()
