"""Shared test fixtures for the gitvault test suite.

Available Fixtures
==================

Git repositories (from tests/fixtures/repos.py)
-----------------------------------------------

temp_git_repo: Working tree with one commit on ``main``, created with GitPython.

temp_git_repo_with_remote: ``(local, remote)`` pair where ``remote`` is a bare
    repository registered as ``origin`` and ``main`` has been pushed.

Runners (from tests/fixtures/runners.py)
----------------------------------------

FakeGitRunner: CommandRunner stand-in that replays scripted CommandResults
    keyed by git arguments and records every call.

git_runner: FakeGitRunner preloaded with an ``origin`` remote and ``main``
    checked out.

make_result: Helper building CommandResult values.
"""
