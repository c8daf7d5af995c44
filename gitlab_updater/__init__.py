"""GitLab updater: updates for host plugins and themes from private GitLab repos."""

__version__ = "1.0.0"
