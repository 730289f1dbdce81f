from pkgmap.cli.app import main

main()
