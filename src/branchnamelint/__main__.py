from branchnamelint.cli import main

main()
