"""
Sample deal audit input for demos and the `sample` CLI command.
"""


def create_sample_inputs() -> dict:
    """
    A semi-detached freehold listed below its valuation range, in the
    camelCase shape the web API accepts.
    """
    return {
        "userAddress": "14 Acacia Avenue, Reading RG1 4QP",
        "apiAddress": "14 ACACIA AVENUE, READING, RG1 4QP",
        "askingPrice": 285000,
        "tenure": "Freehold",
        "salesInLastYear": 6,
        "valuation": {
            "valuationLow": 290000,
            "valuationMedian": 310000,
            "valuationHigh": 330000,
            "confidenceScore": 72,
            "lastSoldDate": "2019-06-14",
        },
        "comparables": {
            "count": 14,
            "recency": 120,
            "variance": 8,
        },
        "checklist": [
            {"category": "roof", "severity": "medium", "description": "Slipped tiles on rear pitch"},
            {"category": "electrics", "severity": "low", "description": "Consumer unit predates 2008"},
        ],
        "leverage": {
            "daysOnMarket": 95,
            "priceDrops": 1,
            "buyerReady": True,
            "chainFree": True,
            "buyerStatus": "first-time",
        },
        "finance": {
            "deposit": 45000,
            "interestRate": 4.5,
            "loanTerm": 25,
            "monthlyIncome": 5200,
            "savings": 72000,
        },
        "riskAppetite": "balanced",
    }
