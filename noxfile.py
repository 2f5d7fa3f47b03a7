"""Nox sessions for GlyphReel development tasks."""

from __future__ import annotations

import nox

nox.options.error_on_missing_interpreters = False
nox.options.sessions = ["lint", "tests"]

PACKAGE = "src/glyphreel"


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks."""
    session.install("ruff")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(name="lint-fix")
def lint_fix(session: nox.Session) -> None:
    """Apply ruff fixes and formatting."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session
def tests(session: nox.Session) -> None:
    """Run pytest without the tests that shell out to ffmpeg."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", *session.posargs, env={"GLYPHREEL_CI": "1"})


@nox.session(name="tests-ffmpeg")
def tests_ffmpeg(session: nox.Session) -> None:
    """Run only the tests that need real ffmpeg/ffprobe binaries."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", "-m", "ffmpeg", *session.posargs)


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy over the package."""
    session.install("-e", ".", "mypy")
    session.run("mypy", "--ignore-missing-imports", PACKAGE)


@nox.session
def coverage(session: nox.Session) -> None:
    """Run the suite under coverage with a floor of 80%."""
    session.install("-e", ".[dev]", "coverage")
    session.run("coverage", "run", "--source=glyphreel", "-m", "pytest", env={"GLYPHREEL_CI": "1"})
    session.run("coverage", "report", "--fail-under=80", "-m")


@nox.session
def build(session: nox.Session) -> None:
    """Build sdist and wheel artifacts."""
    session.install("build")
    session.run("python", "-m", "build")
