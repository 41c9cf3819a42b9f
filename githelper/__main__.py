from githelper.cli.app import main

main()
