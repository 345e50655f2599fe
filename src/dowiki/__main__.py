from dowiki.main import main

main()
