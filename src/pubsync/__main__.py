from pubsync.cli import cli_main

cli_main()
