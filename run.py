import click
from rentalhq import create_app
from rentalhq.extensions import data
from rentalhq.data.seed import demo_data
from rentalhq.models.records import AppData, Generator, Booking, Customer, Payment, Review, Inquiry

app = create_app()

@app.shell_context_processor
def make_shell_context():
    return {
        'data': data,
        'AppData': AppData,
        'Generator': Generator,
        'Booking': Booking,
        'Customer': Customer,
        'Payment': Payment,
        'Review': Review,
        'Inquiry': Inquiry,
    }

@app.cli.command('seed-db')
@click.option('--force', is_flag=True, help='Overwrite a data file that already has records.')
def seed_db_command(force):
    """Writes the demo catalog, customers and bookings to the data file."""
    if data.generators and not force:
        click.echo(f'{app.config["DATA_FILE"]} already has data. Use --force to overwrite it.')
        return

    data.store.write(demo_data())
    data.refresh()
    click.echo(f'Data file populated with {len(data.generators)} generator models, '
               f'{len(data.customers)} customers and {len(data.bookings)} bookings.')
