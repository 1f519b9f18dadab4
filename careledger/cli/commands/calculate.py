"""GST and kilometre calculation commands."""

import click

from careledger.calculators.gst_calculator import (
    GstAmounts,
    apply_gst_to_cents,
    calculate_kilometre_amounts,
    split_gst_inclusive,
)
from careledger.cli.error_handlers import with_error_handling
from careledger.cli.utils.formatters import format_info, format_money, format_table
from careledger.cli.utils.loaders import load_settings


def _echo_amounts(amounts: GstAmounts) -> None:
    click.echo(
        format_table(
            ["Excl GST", "GST", "Incl GST"],
            [
                [
                    format_money(amounts.amount_excl_gst),
                    format_money(amounts.amount_gst),
                    format_money(amounts.amount_incl_gst),
                ]
            ],
        )
    )


@click.command(name="gst")
@click.argument("amount", type=str)
@click.option("--gst-free", is_flag=True, help="The amount is GST free")
@click.option(
    "--inclusive",
    is_flag=True,
    help="AMOUNT already includes GST; split it into its parts",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def gst(amount: str, gst_free: bool, inclusive: bool, debug: bool):
    """Calculate GST for an amount.

    By default AMOUNT excludes GST and GST is added to it.

    Example:
        careledger gst 102.00
        careledger gst 300 --inclusive
    """
    with with_error_handling(debug):
        settings = load_settings()
        if inclusive:
            amounts = split_gst_inclusive(amount, gst_free, settings.gst_rate)
        else:
            amounts = apply_gst_to_cents(amount, gst_free, settings.gst_rate)
        _echo_amounts(amounts)


@click.command(name="kilometres")
@click.argument("rate", type=str)
@click.argument("kms", type=click.IntRange(min=1))
@click.option("--gst-free", is_flag=True, help="The trip is GST free")
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def kilometres(rate: str, kms: int, gst_free: bool, debug: bool):
    """Calculate a kilometre expense from a RATE per km and a distance.

    Example:
        careledger kilometres 0.85 120
    """
    with with_error_handling(debug):
        settings = load_settings()
        click.echo(format_info(f"{kms} km at {rate} per km"))
        _echo_amounts(
            calculate_kilometre_amounts(rate, kms, gst_free, settings.gst_rate)
        )
