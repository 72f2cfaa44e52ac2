"""Daily health report for Yearn strategies on Stargate pools."""
