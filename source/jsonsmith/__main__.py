from jsonsmith.editor import main


if __name__ == "__main__":
    main()
