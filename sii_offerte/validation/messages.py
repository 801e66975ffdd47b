"""Default Italian messages for reason codes.

Display aid only: reason codes are the stable contract and the UI may render
its own text.
"""

from __future__ import annotations

from sii_offerte.schemas.verdict import FieldStatus

MISSING_MESSAGE = "Campo obbligatorio"

REASON_MESSAGES: dict[str, str] = {
    "type-mismatch": "Tipo di valore non valido",
    "too-long": "Testo troppo lungo",
    "too-short": "Testo troppo corto",
    "pattern-mismatch": "Formato non valido",
    "out-of-range": "Valore fuori dai limiti consentiti",
    "too-many-decimals": "Massimo 6 cifre decimali",
    "not-integer": "Deve essere un numero intero",
    "invalid-code": "Codice non previsto dal tracciato SII",
    "invalid-date": "Data non valida",
    "not-allowed-here": "Campo non ammesso con le scelte effettuate",
    "restricted-code": "Codice non ammesso con le scelte effettuate",
    "too-few-items": "Numero di elementi insufficiente",
    "too-many-items": "Troppi elementi",
    "field-not-applicable": "Campo non applicabile: rimuovere il valore inserito",
    "range-inverted": "Il valore minimo deve essere inferiore al massimo",
    "end-before-start": "La data di fine deve essere successiva alla data di inizio",
    "effective-date-too-early": "Oneri di recesso anticipato ammessi solo per offerte valide dal 1° gennaio 2024",
    "effective-date-missing": "Indicare la data di inizio validità dell'offerta",
    "percentage-out-of-range": "La percentuale deve essere compresa tra 0 e 100",
    "duplicate-code": "Valori duplicati non ammessi",
    "band-schedule-invalid": "Le fasce devono coprire la giornata in ordine crescente fino al quarto d'ora 96",
}


def message_for(status: FieldStatus, reason: str | None) -> str | None:
    if status == FieldStatus.MISSING:
        return MISSING_MESSAGE
    if reason is None:
        return None
    return REASON_MESSAGES.get(reason, reason)
