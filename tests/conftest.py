"""Shared offer records."""

from __future__ import annotations

import copy
from typing import Any

import pytest

# Fixed-price domestic electricity offer, monorario, that passes full validation.
VALID_ELECTRICITY_OFFER: dict[str, Any] = {
    "Identification": {"vatNumber": "IT12345678901", "offerCode": "LUCEFIX12"},
    "OfferDetails": {
        "marketType": "01",
        "singleOffer": "SI",
        "clientType": "01",
        "residentialStatus": "01",
        "offerType": "01",
        "activationTypes": ["99"],
        "name": "Luce Fissa 12",
        "description": "Prezzo dell'energia bloccato per 12 mesi",
        "durationMonths": 12,
        "guarantees": "Nessuna garanzia richiesta",
    },
    "ActivationMethods": {"methods": ["01", "03"]},
    "Contacts": {"phone": "800 123 456", "vendorWebsite": "https://www.esempio-energia.it"},
    "Validity": {"startTimestamp": "2025-02-01T00:00:00", "endTimestamp": "2025-12-31T23:59:59"},
    "PaymentMethods": [{"methodType": "01"}],
    "RegulatedComponents": {"codes": ["01"]},
    "PriceType": {"timeBandConfiguration": "01"},
    "Dispatching": [{"type": "01", "name": "Dispacciamento"}],
    "CompanyComponents": [
        {
            "name": "Quota fissa",
            "description": "Costo di commercializzazione",
            "componentClass": "01",
            "macroArea": "01",
            "priceIntervals": [{"price": 60, "unitOfMeasure": "01"}],
        },
        {
            "name": "Prezzo energia",
            "description": "Prezzo della componente energia",
            "componentClass": "01",
            "macroArea": "04",
            "priceIntervals": [{"componentBand": "01", "price": 0.125, "unitOfMeasure": "03"}],
        },
    ],
    "ContractualConditions": [
        {"conditionType": "01", "description": "Attivazione entro 30 giorni", "isLimiting": "02"},
    ],
}


@pytest.fixture()
def valid_offer() -> dict[str, Any]:
    """Deep copy of the valid electricity offer, safe to mutate."""
    return copy.deepcopy(VALID_ELECTRICITY_OFFER)
