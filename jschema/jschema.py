"""

Command line utility to validate JSON documents against JSON Schema (draft-04).

The sub-commands and their arguments are declared in commands.json; each entry
names the function that implements it and how parsed arguments bind to its
parameters.

"""


import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from jschema import _version

ARG_TYPES = {'str': str, 'int': int, 'float': float}


def load_commands() -> List[Dict[str, Any]]:
    """Load the command table from commands.json."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def argument_options(arg: Dict[str, Any]) -> Dict[str, Any]:
    """Translate one argument entry of the command table into add_argument keywords."""
    options = {key: arg[key] for key in ('help', 'nargs', 'choices', 'default') if key in arg}
    if arg['type'] == 'bool':
        options['action'] = 'store_true'
    else:
        options['type'] = ARG_TYPES[arg['type']]
    # Positionals are always required; argparse rejects the keyword for them.
    if arg['name'].startswith('-'):
        options['required'] = arg.get('required', True)
    return options


def create_subparsers(subparsers, commands: List[Dict[str, Any]]) -> None:
    """Add one sub-command parser per command table entry."""
    for command in commands:
        cmd_parser = subparsers.add_parser(command['command'], help=command['description'])
        for arg in command['args']:
            cmd_parser.add_argument(arg['name'], **argument_options(arg))


def build_parser(commands: List[Dict[str, Any]]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Validate JSON documents against JSON Schema (draft-04).')
    parser.add_argument('--version', action='store_true', help='Print the version of jschema.')
    parser.add_argument('--verbose', action='store_true', help='Log debug output to stderr.')
    create_subparsers(parser.add_subparsers(dest='command'), commands)
    return parser


def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)


def bind_arguments(binding: Dict[str, str], args: argparse.Namespace) -> Dict[str, Any]:
    """Map the function parameters of a command to parsed values or literals.

    A value of the form ``args.<name>`` takes the parsed argument ``<name>``
    (skipped if the parser did not set it); anything else is passed as is.
    """
    func_args = {}
    for param, source in binding.items():
        if not source.startswith('args.'):
            func_args[param] = source
        elif hasattr(args, source[5:]):
            func_args[param] = getattr(args, source[5:])
    return func_args


def run_command(command: Dict[str, Any], args: argparse.Namespace) -> None:
    module_name, func_name = command['function']['name'].rsplit('.', 1)
    func = dynamic_import(module_name, func_name)
    func(**bind_arguments(command['function']['args'], args))


def main() -> None:
    """Main function for the command line utility."""
    commands = load_commands()
    parser = build_parser(commands)
    args = parser.parse_args()

    if getattr(args, 'version', False):
        print(f'jschema {_version.version}')
        return

    if getattr(args, 'verbose', False):
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    if args.command is None:
        parser.print_help()
        return

    command: Optional[Dict[str, Any]] = next((cmd for cmd in commands if cmd['command'] == args.command), None)
    if command is None:
        print(f"Error: Command {args.command} not found.")
        sys.exit(1)

    try:
        run_command(command, args)
    except Exception as e:
        print("Error: ", str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
