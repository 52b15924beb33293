from scopepub.cli.app import main

main()
