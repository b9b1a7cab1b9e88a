from .jobs.pusher.cli import main

main()
