"""Entry point for `python -m helpdesk_bot`."""

from helpdesk_bot.main import run

if __name__ == "__main__":
    run()
