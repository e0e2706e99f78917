"""Task runner for the developer.

# Usage

```
nox -l            # list of sessions.
nox -s <session>  # execute a session
nox -k <keyword>  # execute some session
```

"""

import nox

nox.options.reuse_existing_virtualenvs = 1


@nox.session
def wheel(session):
    """Build the wheel."""
    session.install("build", "twine")
    session.run("python", "-m", "build")
    session.run("twine", "check", "dist/*")


@nox.session
def test(session):
    """Run the test in a Nox environment."""
    # the transonic backend defaults to "python", so nothing needs to be compiled
    session.install("-e", ".[test]")

    session.run(
        "pytest",
        "-v",
        "-s",
        "--cov=pylandcore",
        "--cov-append",
        "--cov-report=xml",
        "--cov-report",
        "term-missing",
        "tests",
    )
