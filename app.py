"""Launch the time travel demo window."""

from timetravel.ui.main_window import run

if __name__ == "__main__":
    run()
