from decimal import Decimal, localcontext


def format_units(raw: int, decimals: int) -> str:
    """
    Scale an integer token amount down by 10**decimals without going through float
    :param raw: integer amount in the token's smallest unit (up to uint256)
    :param decimals: token decimals
    :return: fixed point string with exactly `decimals` fractional digits
    """
    if decimals < 0:
        raise ValueError("decimals must be >= 0, got {}".format(decimals))
    with localcontext() as ctx:
        # scaleb rounds the coefficient to the context precision
        ctx.prec = max(ctx.prec, len(str(abs(raw))) + 1)
        return '{:f}'.format(Decimal(raw).scaleb(-decimals))
