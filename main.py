"""GitLab updater: plugin and theme updates from private GitLab repos.

Usage:
    python main.py check --plugin my-plugin/my-plugin.php=1.0.0
    python main.py --help
"""

from dotenv import load_dotenv

load_dotenv()

from gitlab_updater.cli.cli import main


if __name__ == "__main__":
    main()
