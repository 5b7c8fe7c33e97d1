from tickbar.cli import main

main()
