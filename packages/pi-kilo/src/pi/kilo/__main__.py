from pi.kilo.cli import main

main()
