from rngkit.cli import main

main()
