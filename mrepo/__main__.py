from mrepo.cli.app import main

main()
