import os, sys
import argparse
import logging

from .utils import NAME, VERSION, ENTRY_POINTS

CLI_ENTRY = ENTRY_POINTS[0]
DEFAULT_EVENTS = "keydown,keyup,mousemove,click,mousedown,mouseup,stickmove,devicebump,wheel"

def _line():
    try:
        width = os.get_terminal_size().columns
    except OSError:
        width = 32
    return "="*width

def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='[%(asctime)s] %(levelname)-8s %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

def _event_names(value: str):
    names = [n.strip().lower() for n in value.split(",") if n.strip()]
    if not names:
        raise argparse.ArgumentTypeError("expected at least one event name")
    return names

class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(2, '\n%s: error: %s\n' % (self.prog, message))

class CommandLineInterface:
    @classmethod
    def serve(cls, args):
        parser = ArgumentParser(
            prog=f'{CLI_ENTRY} serve',
            description='Start the arcevents WebSocket server (replays received events)',
        )
        parser.add_argument('--host', default='0.0.0.0', help='bind address (default: 0.0.0.0)')
        parser.add_argument('--port', type=int, default=8765, help='port (default: 8765)')
        parser.add_argument('--events', type=_event_names, default=_event_names(DEFAULT_EVENTS),
                            help=f'comma separated event names to subscribe to (default: {DEFAULT_EVENTS})')
        parser.add_argument('--stick-speed', type=float, default=8.0,
                            help='pointer pixels per full-force stickmove sample (default: 8.0)')
        parser.add_argument('-v', '--verbose', action='store_true', default=False,
                            help='log decoded events and dropped messages')
        parsed = parser.parse_args(args)
        _setup_logging(parsed.verbose)

        print(_line())
        print(f"{NAME} v{VERSION} forwarding: {', '.join(parsed.events)}")
        print(_line())
        from .server import run_server
        run_server(parsed.host, parsed.port, parsed.events, parsed.stick_speed)

    @classmethod
    def send(cls, args):
        parser = ArgumentParser(
            prog=f'{CLI_ENTRY} send',
            description='Start the arcevents sender (captures and forwards events). Press Ctrl+Esc to stop.',
        )
        parser.add_argument('--host', default='localhost', help='server address (default: localhost)')
        parser.add_argument('--port', type=int, default=8765, help='port (default: 8765)')
        parser.add_argument('--suppress', action='store_true', default=False,
                            help='block input events from reaching the local OS')
        parser.add_argument('-v', '--verbose', action='store_true', default=False,
                            help='log suppressed and unmapped events')
        parsed = parser.parse_args(args)
        _setup_logging(parsed.verbose)

        from .client import run_client
        run_client(parsed.host, parsed.port, parsed.suppress)

    @classmethod
    def help(cls, args=None):
        help = [
            f"{NAME} v{VERSION}",
            f"Input event forwarding",
            f"",
            f"Syntax: {CLI_ENTRY} COMMAND [OPTIONS]",
            f"",
            f"Where COMMAND is one of:",
        ]+[f"  {k}" for k in COMMANDS]+[
            f"",
            f"For additional help, use:",
            f"  {CLI_ENTRY} COMMAND -h/--help",
        ]
        help = "\n".join(help)
        print(help)

COMMANDS = [k for k in CommandLineInterface.__dict__ if not k.startswith("_")]

def main():
    if len(sys.argv) <= 1:
        CommandLineInterface.help()
        return

    cmd = sys.argv[1]
    if cmd in COMMANDS:
        getattr(CommandLineInterface, cmd)(sys.argv[2:])
    else:
        CommandLineInterface.help()

if __name__ == "__main__":
    main()
