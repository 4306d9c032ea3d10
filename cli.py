"""CLI commands for invitation RSVP management."""

import asyncio
import logging

import typer
import uvicorn

from src.config import settings, setup_logging
from src.rsvp.api_client import HttpRSVPApi
from src.rsvp.deadline import DeadlineGate
from src.rsvp.dtos import Answer, RSVPState, StatusSummary
from src.rsvp.errors import RSVPError
from src.rsvp.party_loader import PartyLoader
from src.rsvp.state_machine import RSVPStateMachine
from src.rsvp.summary import build_summary, format_submitted_at

app = typer.Typer(help="CLI commands for invitation RSVP management")


def _print_summary(summary: StatusSummary) -> None:
    typer.secho(f"  Invitados confirmados: {summary.confirmed}", fg=typer.colors.BLUE)
    for member in summary.members:
        typer.secho(f"  - {member.name}: {member.answer}", fg=typer.colors.BLUE)
    for extra in summary.extras:
        typer.secho(f"  - {extra} (acompañante)", fg=typer.colors.BLUE)
    if summary.note:
        typer.secho(f"  Nota: {summary.note}", fg=typer.colors.MAGENTA)
    submitted_at = format_submitted_at(summary.submitted_at)
    if submitted_at:
        typer.secho(f"  Registrado: {submitted_at}", fg=typer.colors.CYAN)


@app.command()
def serve(
    host: str = typer.Option(settings.app_host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.app_port, "--port", "-p", help="Port to listen on"),
):
    """Run the RSVP proxy API."""
    uvicorn.run("src.main:app", host=host, port=port, reload=settings.debug)


@app.command()
def party(
    token: str = typer.Argument(..., help="Invitation token"),
):
    """Show the party registered for an invitation token."""
    setup_logging(logging.WARNING)

    async def _load_party():
        return await PartyLoader(HttpRSVPApi()).load(token, settings.default_guest_name)

    try:
        loaded = asyncio.run(_load_party())
    except RSVPError as e:
        typer.secho(e.message, fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Party: {loaded.display_name}", fg=typer.colors.GREEN)
    for member in loaded.members:
        typer.secho(f"  - {member}", fg=typer.colors.BLUE)
    typer.secho(f"  Acompañantes permitidos: {loaded.allowed_extra}", fg=typer.colors.CYAN)


@app.command()
def status(
    token: str = typer.Argument(..., help="Invitation token"),
):
    """Show the stored RSVP for an invitation token, if any."""
    setup_logging(logging.WARNING)

    try:
        raw_status = asyncio.run(HttpRSVPApi().fetch_status(token))
    except RSVPError as e:
        typer.secho(e.message, fg=typer.colors.RED)
        raise typer.Exit(1)

    if raw_status is None:
        typer.secho("Sin confirmación registrada.", fg=typer.colors.YELLOW)
        return

    summary = build_summary(raw_status, settings.default_guest_name)
    typer.secho("Confirmación registrada", fg=typer.colors.GREEN)
    _print_summary(summary)


def _parse_answers(values: list[str]) -> dict[str, Answer]:
    answers = {}
    for value in values:
        name, sep, answer = value.rpartition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=yes|no, got {value!r}", param_hint="--answer")
        try:
            answers[name.strip()] = Answer(answer.strip().lower())
        except ValueError:
            raise typer.BadParameter(f"Answer must be yes or no, got {answer!r}", param_hint="--answer")
    return answers


@app.command()
def rsvp(
    token: str = typer.Argument(..., help="Invitation token"),
    answers: list[str] = typer.Option(
        [],
        "--answer",
        "-a",
        help="Member answer as NAME=yes|no; repeat for each member",
    ),
    extras: list[str] = typer.Option(
        [],
        "--extra",
        "-e",
        help="Name of an additional guest; repeat for each seat",
    ),
    note: str = typer.Option("", "--note", "-n", help="Message for the hosts"),
):
    """Submit an RSVP for an invitation token."""
    setup_logging(logging.WARNING)
    parsed = _parse_answers(answers)

    async def _submit():
        async with RSVPStateMachine(HttpRSVPApi(), token=token, poll_interval=0) as machine:
            if machine.state is not RSVPState.EDITABLE:
                return machine
            if machine.error:
                typer.secho(machine.error_message, fg=typer.colors.YELLOW)

            for member in machine.members:
                if member.name in parsed:
                    machine.set_answer(member.name, parsed[member.name])
            if len(extras) > len(machine.extras):
                typer.secho(
                    f"Only {len(machine.extras)} additional seat(s) allowed; extra names ignored",
                    fg=typer.colors.YELLOW,
                )
            for index, name in enumerate(extras[: len(machine.extras)]):
                machine.set_extra_name(index, name)
            machine.set_note(note)

            await machine.submit()
            return machine

    machine = asyncio.run(_submit())

    if machine.state is RSVPState.CONFIRMED:
        typer.secho("¡Gracias! Hemos recibido tu confirmación.", fg=typer.colors.GREEN)
        _print_summary(machine.summary)
    elif machine.state is RSVPState.ALREADY_CONFIRMED:
        typer.secho("Ya registramos tu confirmación previamente.", fg=typer.colors.YELLOW)
        if machine.summary:
            _print_summary(machine.summary)
    else:
        typer.secho(machine.error_message or "No pudimos registrar tu asistencia.", fg=typer.colors.RED)
        missing = [member.name for member in machine.members if member.answer is None]
        if missing:
            typer.secho(f"  Sin respuesta: {', '.join(missing)}", fg=typer.colors.RED)
        raise typer.Exit(1)


@app.command()
def deadline():
    """Show the RSVP deadline and whether it has passed."""
    gate = DeadlineGate()
    typer.secho(f"Deadline: {gate.label} ({gate.deadline.isoformat()})", fg=typer.colors.BLUE)
    if gate.is_past_deadline():
        typer.secho("Confirmaciones cerradas.", fg=typer.colors.RED)
    else:
        typer.secho("Confirmaciones abiertas.", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
