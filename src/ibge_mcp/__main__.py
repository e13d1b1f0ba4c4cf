from ibge_mcp.ext.mcp.server import main

if __name__ == "__main__":
    main()
