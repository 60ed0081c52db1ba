"""
Command-line front-end for the booking backend.

Usage:
  smart-booking health
  smart-booking services
  smart-booking login --email you@example.com
  smart-booking book
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from datetime import date
from typing import Awaitable, Callable

from smart_booking.application.exceptions import BookingApiError, user_message
from smart_booking.core.config import settings
from smart_booking.core.logging import configure_logging
from smart_booking.domain.entities.appointment import Appointment
from smart_booking.domain.entities.wizard_state import WizardState, WizardStep
from smart_booking.wiring.dependencies import Container, build_container


def format_long_date(day: date) -> str:
    return f"{day:%A}, {day:%B} {day.day}, {day:%Y}"


def _print_appointment(appointment: Appointment) -> None:
    notes = f"  ({appointment.notes})" if appointment.notes else ""
    print(f"{appointment.id}  {appointment.date} {appointment.time}  {appointment.status.value}{notes}")


async def cmd_health(container: Container, args: argparse.Namespace) -> int:
    if await container.api.health_check():
        print("Connected to Backend")
        return 0
    print("Connection Failed: Backend is not responding")
    return 1


async def cmd_services(container: Container, args: argparse.Namespace) -> int:
    for service in await container.catalog.list_services():
        print(f"{service.id}  {service.name}  {service.duration} min  ${service.price:.2f}  [{service.category}]")
    return 0


async def cmd_appointments(container: Container, args: argparse.Namespace) -> int:
    appointments = await container.appointments.list_appointments()
    if not appointments:
        print("No appointments yet.")
    for appointment in appointments:
        _print_appointment(appointment)
    return 0


async def cmd_show(container: Container, args: argparse.Namespace) -> int:
    _print_appointment(await container.appointments.get_appointment(args.id))
    return 0


async def cmd_cancel(container: Container, args: argparse.Namespace) -> int:
    _print_appointment(await container.appointments.cancel_appointment(args.id))
    print("Appointment Cancelled")
    return 0


async def cmd_slots(container: Container, args: argparse.Namespace) -> int:
    for slot in await container.appointments.available_slots(args.date, args.service):
        print(f"{slot.time}  {'available' if slot.available else 'booked'}")
    return 0


async def cmd_login(container: Container, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    user = await container.account.login(args.email, password)
    print(f"Welcome back, {user.name}!")
    return 0


async def cmd_register(container: Container, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    user = await container.account.register(args.name, args.email, password)
    print(f"Account Created! Signed in as {user.email}")
    return 0


async def cmd_logout(container: Container, args: argparse.Namespace) -> int:
    container.account.logout()
    print("Logged Out")
    return 0


async def cmd_profile(container: Container, args: argparse.Namespace) -> int:
    user = await container.account.get_profile()
    print(f"{user.name} <{user.email}>" + (f"  {user.phone}" if user.phone else ""))
    return 0


async def cmd_book(container: Container, args: argparse.Namespace) -> int:
    wizard = container.wizard
    if args.service:
        await wizard.select_service(args.service)

    while True:
        state = wizard.state
        _print_error(state)

        if state.step == WizardStep.SELECTING_DATE:
            raw = _ask(f"Date [YYYY-MM-DD, default {state.draft.date.isoformat()}]: ")
            if raw is None:
                return 1
            try:
                day = date.fromisoformat(raw) if raw else state.draft.date
            except ValueError:
                print("Please use the YYYY-MM-DD format.")
                continue
            await wizard.select_date(day)

        elif state.step == WizardStep.SELECTING_TIME:
            print(f"\nAvailable Times - {format_long_date(state.draft.date)}")
            print("  ".join(s.time if s.available else f"({s.time})" for s in state.slots) or "No times on this day.")
            raw = _ask("Time [HH:MM, or 'date' to pick another day]: ")
            if raw is None:
                return 1
            if raw == "date":
                await wizard.select_date(_ask_date(state.draft.date))
                continue
            wizard.select_time(raw)

        elif state.step == WizardStep.ENTERING_DETAILS:
            print(f"\nYour Details - {state.draft.date:%B} {state.draft.date.day}, {state.draft.date:%Y} at {state.draft.time}")
            name = _ask(f"Full Name [{state.draft.name}]: ")
            if name is None:
                return 1
            email = _ask(f"Email [{state.draft.email}]: ") or state.draft.email
            message = _ask("Message (optional, 'back' to change time): ") or ""
            if message == "back":
                await wizard.back()
                continue
            wizard.update_details(name=name or state.draft.name, email=email, message=message)
            await wizard.submit()

        else:
            _print_confirmation(state)
            again = _ask("Book another appointment? [y/N]: ")
            if again and again.lower().startswith("y"):
                wizard.book_another()
                continue
            return 0


def _ask(prompt: str) -> str | None:
    try:
        return input(prompt).strip()
    except EOFError:
        return None


def _ask_date(default: date) -> date:
    raw = _ask("Date [YYYY-MM-DD]: ")
    try:
        return date.fromisoformat(raw) if raw else default
    except ValueError:
        return default


def _print_error(state: WizardState) -> None:
    if state.error is not None:
        print(f"! {state.error.message}")


def _print_confirmation(state: WizardState) -> None:
    confirmation = state.confirmation
    if confirmation is None:
        return
    draft = confirmation.draft
    print("\nBooking Confirmed!")
    print("Your appointment has been successfully scheduled.")
    print(f"  Date:  {format_long_date(draft.date)}")
    print(f"  Time:  {draft.time}")
    print(f"  Name:  {draft.name}")
    print(f"  Email: {draft.email}")
    print(f"  Reference: {confirmation.appointment.id} ({confirmation.appointment.status.value})")


COMMANDS: dict[str, Callable[[Container, argparse.Namespace], Awaitable[int]]] = {
    "health": cmd_health,
    "services": cmd_services,
    "appointments": cmd_appointments,
    "show": cmd_show,
    "cancel": cmd_cancel,
    "slots": cmd_slots,
    "login": cmd_login,
    "register": cmd_register,
    "logout": cmd_logout,
    "profile": cmd_profile,
    "book": cmd_book,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smart-booking", description="Book and manage appointments")
    parser.add_argument("--api-url", default=None, help=f"Backend base URL (default: {settings.API_BASE_URL})")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Test the backend connection")
    sub.add_parser("services", help="List services")
    sub.add_parser("appointments", help="List your appointments")
    show = sub.add_parser("show", help="Show one appointment")
    show.add_argument("id")
    cancel = sub.add_parser("cancel", help="Cancel an appointment")
    cancel.add_argument("id")
    slots = sub.add_parser("slots", help="Show available times for a date")
    slots.add_argument("date", help="YYYY-MM-DD")
    slots.add_argument("--service", default=None)
    login = sub.add_parser("login", help="Sign in")
    login.add_argument("--email", required=True)
    login.add_argument("--password", default=None)
    register = sub.add_parser("register", help="Create an account")
    register.add_argument("--name", required=True)
    register.add_argument("--email", required=True)
    register.add_argument("--password", default=None)
    sub.add_parser("logout", help="Sign out and forget the stored token")
    sub.add_parser("profile", help="Show your profile")
    book = sub.add_parser("book", help="Book an appointment step by step")
    book.add_argument("--service", default=None)
    return parser


async def run(args: argparse.Namespace) -> int:
    config = settings.model_copy(update={"API_BASE_URL": args.api_url}) if args.api_url else settings
    container = build_container(config)
    try:
        return await COMMANDS[args.command](container, args)
    except BookingApiError as e:
        print(f"Error: {user_message(e)}", file=sys.stderr)
        return 1
    finally:
        await container.aclose()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or "WARNING")
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
