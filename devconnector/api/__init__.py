# GitHub API integration module

from .github_api import GitHubRepoFetcher, get_github_fetcher

__all__ = [
    "GitHubRepoFetcher",
    "get_github_fetcher",
]
