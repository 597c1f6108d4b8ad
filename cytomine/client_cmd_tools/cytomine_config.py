import argparse
import logging
from cytomine import configs
from cytomine.utils.logging_utils import load_cmdline_logging_config
from rich.prompt import Prompt, Confirm
from rich.console import Console

# Console for interactive output, one logger for the user and one for the developer
console = Console()
_LOGGER = logging.getLogger(__name__)
_USER_LOGGER = logging.getLogger('user_logger')

_MASKED_KEYS = (configs.PASSWORD_KEY,)


def _is_valid_url(url: str) -> bool:
    return url.startswith('http://') or url.startswith('https://')


def configure_default_host():
    """Configure the default Cytomine host interactively."""
    console.print(f"Current default host: [cyan]{configs.get_value(configs.HOST_KEY, 'Not set')}[/cyan]")
    host = Prompt.ask("Enter the URL of the Cytomine server (leave empty to abort)").strip()
    if host == '':
        return

    if not _is_valid_url(host):
        console.print("[yellow]⚠️  URL should start with http:// or https://[/yellow]")
        return

    configs.set_value(configs.HOST_KEY, host.rstrip('/'))
    console.print("[green]✅ Default host set successfully.[/green]")


def configure_credentials():
    """Ask the username and password and save them."""
    username = Prompt.ask('Username (leave empty to abort)').strip()
    if username == '':
        return
    password = Prompt.ask('Password', password=True)
    if password == '':
        console.print("[yellow]⚠️  Empty password, nothing saved.[/yellow]")
        return

    try:
        configs.set_value(configs.USERNAME_KEY, username)
        configs.set_value(configs.PASSWORD_KEY, password)
        console.print("[green]✅ Credentials saved.[/green]")
    except OSError as e:
        console.print("[red]❌ Error saving credentials.[/red]")
        _LOGGER.exception(e)


def mask_value(value: str) -> str:
    return f"{value[:1]}...{value[-1:]}" if len(value) > 4 else '****'


def show_all_configurations():
    """Display all current configurations, with the password masked."""
    config = configs.read_config()
    if config is not None and len(config) > 0:
        console.print("[bold]📋 Current configurations:[/bold]")
        for key, value in config.items():
            if key in _MASKED_KEYS and value:
                console.print(f"  [cyan]{key}[/cyan]: [dim]{mask_value(str(value))}[/dim]")
            else:
                console.print(f"  [cyan]{key}[/cyan]: {value}")
    else:
        console.print("[dim]No configurations found.[/dim]")


def clear_all_configurations():
    """Clear all configurations with confirmation."""
    yesno = Confirm.ask('Are you sure you want to clear all configurations?',
                        default=True)
    if yesno:
        configs.clear_all_configurations()
        console.print("[green]✅ All configurations cleared.[/green]")


def test_connection() -> bool:
    """Log in with the current settings and show the authenticated user."""
    from cytomine.api.client import Cytomine
    console.print("[blue]🔄 Testing connection...[/blue]")
    try:
        with Cytomine(set_default=False) as session:
            session.login()
            user = session.fetch_current_user()
    except Exception as e:
        console.print(f"[red]❌ Connection failed: {e}[/red]")
        console.print("[dim]💡 Check your host and credentials settings[/dim]")
        return False
    console.print(f"[green]✅ Connection successful! Logged in as {user.username}.[/green]")
    return True


def interactive_mode():
    console.print("[bold blue]🔧 Cytomine Configuration Tool[/bold blue]")

    if len(configs.read_config()) == 0:
        console.print("[yellow]👋 Welcome! Let's set up your server first.[/yellow]")
        configure_default_host()

    while True:
        console.print("\n[bold]📋 Select the action you want to perform:[/bold]")
        console.print(" [cyan](1)[/cyan] Configure the default host")
        console.print(" [cyan](2)[/cyan] Configure the credentials")
        console.print(" [cyan](3)[/cyan] Show all configuration settings")
        console.print(" [cyan](4)[/cyan] Clear all configuration settings")
        console.print(" [cyan](5)[/cyan] Test connection")
        console.print(" [cyan](q)[/cyan] Exit")
        choice = Prompt.ask("Enter your choice").lower().strip()

        if choice == '1':
            configure_default_host()
        elif choice == '2':
            configure_credentials()
        elif choice == '3':
            show_all_configurations()
        elif choice == '4':
            clear_all_configurations()
        elif choice == '5':
            test_connection()
        elif choice in ('q', 'exit', 'quit'):
            console.print("[green]👋 Goodbye![/green]")
            break
        else:
            console.print("[red]❌ Invalid choice. Please enter a number between 1 and 5 or 'q' to quit.[/red]")


def main(argv: list[str] | None = None):
    load_cmdline_logging_config()
    parser = argparse.ArgumentParser(
        description='🔧 Cytomine Client Configuration Tool',
        epilog="""
Examples:
  cytomine-config                                   # Interactive mode
  cytomine-config --host https://demo.cytomine.com  # Set the default host
  cytomine-config --username admin --password xxx   # Set the credentials
  cytomine-config --show                            # Show the configuration
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--host', '--url', type=str, help='Default host to set')
    parser.add_argument('--username', type=str, help='Username to set')
    parser.add_argument('--password', type=str, help='Password to set')
    parser.add_argument('--show', action='store_true', help='Show the current configuration')
    parser.add_argument('--clear', action='store_true', help='Clear the configuration')
    parser.add_argument('--test', action='store_true', help='Test the connection with the current configuration')
    parser.add_argument('-i', '--interactive', action='store_true',
                        help='Interactive mode (default if no other arguments provided)')

    args = parser.parse_args(argv)

    if args.clear:
        configs.clear_all_configurations()
        _USER_LOGGER.info("All configurations cleared.")

    if args.host is not None:
        if not _is_valid_url(args.host):
            _USER_LOGGER.error("URL must start with http:// or https://")
            return
        configs.set_value(configs.HOST_KEY, args.host.rstrip('/'))
        _USER_LOGGER.info("Default host saved.")

    if args.username is not None:
        configs.set_value(configs.USERNAME_KEY, args.username)
        _USER_LOGGER.info("Username saved.")

    if args.password is not None:
        configs.set_value(configs.PASSWORD_KEY, args.password)
        _USER_LOGGER.info("Password saved.")

    if args.show:
        show_all_configurations()

    if args.test:
        test_connection()

    no_arguments_provided = not any((args.host, args.username, args.password,
                                     args.show, args.clear, args.test))

    if no_arguments_provided or args.interactive:
        interactive_mode()


if __name__ == "__main__":
    main()
