from specroute.app import main

main()
