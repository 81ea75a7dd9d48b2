import asyncio

from currency_converter.config import configure_logging, load_settings, use_system_locale
from currency_converter.domain.models import UNAVAILABLE
from currency_converter.services.converter import ConverterController
from currency_converter.services.history import format_transaction
from currency_converter.tools.fx import normalize_code


HELP = """Commands:
  list [filter]                 show supported currencies
  from <code> / to <code>       pick source / target currency
  amount <n>                    set the amount (non-numeric -> 0)
  convert                       convert the current selection
  convert <n> <from> to <to>    e.g. convert 10 usd to eur
  history                       last 5 conversions
  exit | quit"""


def _check_code(controller: ConverterController, code: str) -> str | None:
    # Only validate once a catalog is available
    code = normalize_code(code)
    currencies = controller.state.currencies
    if currencies and code not in currencies:
        return f"Unknown currency: {code}. Use 'list' to see supported codes."
    return None


async def handle_command(controller: ConverterController, text: str) -> str:
    parts = text.strip().split()
    if not parts:
        return ""

    cmd = parts[0].lower()

    # -----------------------------
    # Catalog
    # -----------------------------
    if cmd == "list":
        needle = " ".join(parts[1:]).lower()
        lines = [
            label
            for code, label in controller.currency_options()
            if not needle or needle in label.lower()
        ]
        if not lines:
            return "No currencies available."
        return "\n".join(lines)

    # -----------------------------
    # Selection
    # -----------------------------
    if cmd in ("from", "to"):
        if len(parts) != 2:
            return f"Usage: {cmd} <code>"
        err = _check_code(controller, parts[1])
        if err:
            return err
        if cmd == "from":
            controller.select_from(parts[1])
        else:
            controller.select_to(parts[1])
        return f"{cmd.capitalize()}: {normalize_code(parts[1]).upper()}"

    if cmd == "amount":
        controller.set_amount(parts[1] if len(parts) > 1 else "")
        return f"Amount: {controller.state.amount}"

    # -----------------------------
    # Conversion
    # -----------------------------
    if cmd == "convert":
        if len(parts) == 5 and parts[3].lower() == "to":
            # Example: "convert 120 gbp to usd"
            for code in (parts[2], parts[4]):
                err = _check_code(controller, code)
                if err:
                    return err
            controller.set_amount(parts[1])
            controller.select_from(parts[2])
            controller.select_to(parts[4])
        elif len(parts) != 1:
            return "Usage: convert [<amount> <from> to <to>]"

        result = await controller.request_conversion()
        if result is None:
            return "Select both currencies first (from <code>, to <code>)."
        if result == UNAVAILABLE:
            return UNAVAILABLE
        return controller.converted_label()

    if cmd == "history":
        txs = controller.state.transactions
        if not txs:
            return "No conversions yet."
        return "Last 5 Conversions:\n" + "\n".join(f"- {format_transaction(t)}" for t in txs)

    if cmd == "help":
        return HELP

    return f"Unknown command: {parts[0]}. Type 'help'."


async def chat(controller: ConverterController | None = None):
    controller = controller or ConverterController()

    print("\n=== Currency Converter ===")
    print("Loading currencies...")
    currencies = await controller.load_catalog()
    if currencies:
        print(f"{len(currencies)} currencies available. Type 'help' for commands.\n")
    else:
        print("⚠️ Could not load the currency list. Conversions may still work.\n")

    while True:
        user_input = (await asyncio.to_thread(input, "> ")).strip()

        # -----------------------------
        # Exit handling
        # -----------------------------
        if user_input.lower() in {"exit", "quit"}:
            print("Goodbye!")
            break

        reply = await handle_command(controller, user_input)
        if reply:
            print(reply, "\n")


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    use_system_locale()
    try:
        asyncio.run(chat())
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")


if __name__ == "__main__":
    main()
