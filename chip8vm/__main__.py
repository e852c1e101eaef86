from chip8vm.app import main

main()
