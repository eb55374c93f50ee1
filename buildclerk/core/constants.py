"""
Constants
Centralised storage for SCM variable names, host result codes and backend routes.
"""
GIT_LOCAL_BRANCH = "GIT_LOCAL_BRANCH"
GIT_COMMIT = "GIT_COMMIT"

# Host result codes reported as a failed build. Anything else non-null is a success.
FAILURE_RESULTS = frozenset({"FAILURE", "UNSTABLE"})

BUILDS_PATH = "builds"
