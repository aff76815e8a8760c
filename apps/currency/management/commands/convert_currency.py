from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError

from apps.currency.domain.constants import MAX_AMOUNT
from apps.currency.domain.services import get_default_converter


class Command(BaseCommand):
    help = 'Convert an amount between currencies with the exchange spread applied'

    def add_arguments(self, parser):
        parser.add_argument('amount', type=str, help='Amount to convert')
        parser.add_argument('from_currency', type=str, help='Source currency code (e.g. USD)')
        parser.add_argument('to_currency', type=str, help='Target currency code (e.g. EUR)')
        parser.add_argument(
            '--spread',
            dest='spread',
            type=str,
            default=None,
            help='Spread fraction between 0 and 1 (defaults to CURRENCY_DEFAULT_SPREAD)'
        )
        parser.add_argument(
            '--raw',
            action='store_true',
            help='Print the converted decimal instead of the formatted amount'
        )

    def handle(self, **options):
        try:
            amount = Decimal(options['amount'])
        except InvalidOperation:
            raise CommandError('Invalid amount. Must be a number')

        if not amount.is_finite():
            raise CommandError('Invalid amount. Must be a finite number')

        if abs(amount) > MAX_AMOUNT:
            raise CommandError(f'Invalid amount. Must not exceed {MAX_AMOUNT}')

        spread = None
        if options['spread'] is not None:
            try:
                spread = Decimal(options['spread'])
            except InvalidOperation:
                raise CommandError('Invalid spread. Must be a number between 0 and 1')
            if not spread.is_finite() or not Decimal('0') <= spread <= Decimal('1'):
                raise CommandError('Invalid spread. Must be a number between 0 and 1')

        converter = get_default_converter()
        result = converter.convert_detailed(
            amount,
            options['from_currency'],
            options['to_currency'],
            spread
        )

        if not result.converted and result.source_currency.upper() != result.exchanged_currency.upper():
            self.stdout.write(
                self.style.WARNING(
                    f"No rate for {result.source_currency} or {result.exchanged_currency}; amount left unconverted"
                )
            )

        if options['raw']:
            self.stdout.write(str(result.converted_amount))
        else:
            self.stdout.write(
                self.style.SUCCESS(converter.format(result.converted_amount, options['to_currency']))
            )
