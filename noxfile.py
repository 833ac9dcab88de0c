import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

nox.options.sessions = ["tests"]


def _install(session: nox.Session) -> None:
    """Install HomePlate with the test extra into the nox virtualenv."""
    session.install("-e", ".[test]")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the full ordering suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Aggregates, state machine and ledger only; no API or adapters."""
    _install(session)
    session.run("pytest", "tests/ordering/domain/", "tests/ordering/bdd/", *session.posargs)


@nox.session(python="3.12")
def coverage(session: nox.Session) -> None:
    """Full suite with a coverage report for the ordering package."""
    _install(session)
    session.run("pytest", "--cov=ordering", "--cov-report=term-missing", *session.posargs)


@nox.session(python="3.12")
def loadtest(session: nox.Session) -> None:
    """Headless locust run against a server at $HOST (default localhost:8000)."""
    _install(session)
    host = session.env.get("HOST", "http://localhost:8000")
    session.run(
        "locust",
        "-f",
        "loadtests/locustfile.py",
        "MixedWorkloadUser",
        "--headless",
        "-u",
        "20",
        "-r",
        "5",
        "-t",
        "60s",
        "--host",
        host,
    )
