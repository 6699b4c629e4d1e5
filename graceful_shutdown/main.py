import click
from graceful_shutdown.modules.logging import OUTPUT_TYPES, BaseLogger, create_logger
from graceful_shutdown.modules.service import create_serve_command


class ServiceContext:
    """State shared by the CLI commands."""
    def __init__(self):
        self.logger: BaseLogger = None

pass_context = click.make_pass_decorator(ServiceContext, ensure=True)

@click.group()
@click.version_option(package_name='graceful-shutdown')
@click.option('--output', '-o',
              type=click.Choice(list(OUTPUT_TYPES)),
              default='colorful',
              help='Log format: colorful for terminals, plain for files, json for log collectors',
              envvar='GSD_OUTPUT')
@click.option('--log-level', '-l',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
              default='INFO',
              help='Minimum level of the emitted logs',
              envvar='GSD_LOG_LEVEL')
@pass_context
def cli(ctx, output, log_level):
    """HTTP service that drains in-flight requests before it exits."""
    ctx.logger = create_logger(output, log_level)

cli.add_command(create_serve_command())

def main():
    cli()

if __name__ == '__main__':
    main()
