from acmestore.cli.main import main

main()
