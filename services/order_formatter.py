"""
Order Formatter Service

Renders a composed order as the plain-text message sent to the business.
Used by:
- Messaging handoff (deep link text)
- Order preview before checkout
"""

from decimal import Decimal

import config
from models.order import BusinessProfile, ComposedOrder, ComposedOrderLine
from services.pricing import round_money


class OrderFormatterService:
    """Message and price formatting for composed orders"""

    @staticmethod
    def format_price(amount: Decimal, currency_symbol: str | None = None, locale: str | None = None) -> str:
        """
        Format a money amount for display.

        Args:
            amount: Amount in major units
            currency_symbol: Prefix symbol (defaults to CURRENCY_SYMBOL)
            locale: One of PRICE_LOCALE_SEPARATORS (defaults to PRICE_LOCALE)

        Returns:
            e.g. "₺1.234,56" for tr-TR, "$1,234.56" for en-US
        """
        symbol = config.CURRENCY_SYMBOL if currency_symbol is None else currency_symbol
        thousands_sep, decimal_sep = config.PRICE_LOCALE_SEPARATORS[locale or config.PRICE_LOCALE]

        rounded = round_money(Decimal(amount))
        sign = "-" if rounded < 0 else ""
        integer_part, fraction_part = f"{abs(rounded):.2f}".split(".")

        groups = []
        while len(integer_part) > 3:
            groups.insert(0, integer_part[-3:])
            integer_part = integer_part[:-3]
        groups.insert(0, integer_part)

        return f"{sign}{symbol}{thousands_sep.join(groups)}{decimal_sep}{fraction_part}"

    @staticmethod
    def line_label(line: ComposedOrderLine) -> str:
        """Item name, plus the chosen size and extras in parentheses."""
        options = []
        if line.size_name:
            options.append(line.size_name)
        options.extend(f"+{extra}" for extra in line.extra_names)
        if not options:
            return line.name
        return f"{line.name} ({', '.join(options)})"

    @staticmethod
    def render_message(order: ComposedOrder, profile: BusinessProfile) -> str:
        """
        Render the order message.

        Layout:
            header, business, customer block, one "• {qty}x {label} - {total}"
            row per line, subtotal and delivery fee (only when a fee is charged),
            total, optional notes, footer (omitted when empty)
        """
        def price(amount: Decimal) -> str:
            return OrderFormatterService.format_price(amount, profile.currency_symbol, profile.locale)

        order_lines = "\n".join(
            f"• {line.quantity}x {OrderFormatterService.line_label(line)} - {price(line.line_total)}"
            for line in order.lines
        )
        notes_block = f"\n📝 *Not:* {order.notes}" if order.notes else ""
        fee_block = (
            f"🧾 *Ara Toplam:* {price(order.subtotal)}\n"
            f"🛵 *Teslimat Ücreti:* {price(order.delivery_fee)}\n"
            if order.delivery_fee else ""
        )

        message = (
            f"🍔 *SİPARİŞ*\n"
            f"\n"
            f"📍 *İşletme:* {order.business_name}\n"
            f"\n"
            f"👤 *Müşteri:* {order.customer_name}\n"
            f"📱 *Telefon:* {order.customer_phone}\n"
            f"\n"
            f"📦 *Sipariş Detayı:*\n"
            f"{order_lines}\n"
            f"\n"
            f"{fee_block}"
            f"💰 *Toplam:* {price(order.grand_total)}\n"
            f"{notes_block}"
        )

        if config.ORDER_MESSAGE_FOOTER:
            message += f"\n\n{config.ORDER_MESSAGE_FOOTER}"

        return message
