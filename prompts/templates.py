"""Prompt templates for vehicle identification, registration OCR and checklists."""

from __future__ import annotations

from string import Template

# --- Vehicle photo identification ---

VEHICLE_PHOTO = Template(
    """Analyze this car image and identify:
- Make (brand)
- Model
- Approximate year/generation
- Body type (sedan, hatchback, SUV, etc.)
$focus
Respond ONLY with a JSON object:
{
  "make": "string",
  "model": "string",
  "year": "string or range",
  "bodyType": "string",
  "vehicleDescription": "Make Model Year" (concise string for text input)
}

If you cannot identify the car with confidence, set all fields to "unknown"."""
)

ANALYSIS_FOCUS: dict[str, str] = {
    "vehicle-identification": "",
    "damage-assessment": (
        "\nAlso note any visible body damage, rust or mismatched paint in "
        "the vehicleDescription.\n"
    ),
}

# --- Registration document OCR ---

REGISTRATION_DOCUMENT = Template(
    """This is a vehicle registration document ($document_label).

Extract the following information:
- Make (Hersteller/Marke) - field D.1 or 2.1
- Model (Handelsbezeichnung) - field D.2 or 2.2
- Type/Variant (Typ/Variante) - field D.3 or D
- First Registration (Erstzulassung) - field B or I
- VIN (Fahrzeug-Identifizierungsnummer) - field E or 4
- Engine Displacement (Hubraum) - field P.1 or 8
- Power (Leistung) - field P.2 or 7
- Fuel Type (Kraftstoff) - field P.3 or 5

Respond ONLY with a JSON object:
{
  "make": "string",
  "model": "string",
  "variant": "string",
  "firstRegistration": "YYYY-MM-DD",
  "vin": "string",
  "displacement": "number ccm",
  "power": "number kW/PS",
  "fuelType": "string",
  "extractedInfo": "Make Model, Year FirstReg, FuelType, Power" (concise string for text input)
}

If the document is not readable or not a vehicle registration, respond with:
{
  "error": "Document not readable or not a vehicle registration",
  "extractedInfo": ""
}

Important:
- Look for fields with labels like "2.", "2.1", "2.2", "D.1", "D.2", "B", "E", etc.
- German registration documents have these specific field numbers
- Extract ALL readable information even if some fields are unclear"""
)

DOCUMENT_LABELS: dict[str, str] = {
    "registration": "Fahrzeugschein/Zulassungsbescheinigung Teil I",
    "title": "Fahrzeugbrief/Zulassungsbescheinigung Teil II",
}

# --- Inspection checklist ---

CHECKLIST_SYSTEM = Template(
    """Du bist CheckCar, ein KI-Experte für Gebrauchtwagen-Checks.

DEINE AUFGABE:
Erstelle eine modellspezifische Checkliste für den Gebrauchtwagenkauf basierend auf häufigen Schwachstellen und Verschleißteilen des konkreten Fahrzeugmodells.

FORMAT:
Antworte IMMER als strukturiertes JSON-Objekt mit diesem Format:
{
  "vehicleInfo": {
    "make": "string",
    "model": "string",
    "year": number,
    "mileage": "string"
  },
  "riskScore": number (0-100),
  "priceEstimate": {
    "min": number,
    "max": number
  },
  "checklistItems": [
    {
      "category": "Motor & Antrieb" | "Fahrwerk & Bremsen" | "Karosserie & Rost" | "Innenraum & Elektronik",
      "item": "string - konkrete Prüfung",
      "risk": "high" | "medium" | "low",
      "why": "string - warum ist das beim konkreten Modell wichtig?"
    }
  ]$extra_fields
}

WICHTIG:
- Sei SEHR spezifisch für das konkrete Modell
- Nenne bekannte Schwachstellen (z.B. "Golf 7 TDI: Prüfe Dieselpartikelfilter auf Verstopfung")
- Kategorisiere nach Risiko: high (kritisch, teuer), medium (wichtig), low (optional)
- Verwende ausschließlich die vier genannten Kategorien
- Gib realistische Preisspannen in Euro an
- $item_count Checkpunkte$extra_rules"""
)

CHECKLIST_TIERS: dict[str, dict[str, str]] = {
    "lite": {
        "item_count": "Mind. 8-12",
        "extra_fields": "",
        "extra_rules": "",
    },
    "premium": {
        "item_count": "Mind. 25-30",
        "extra_fields": ',\n  "negotiationTips": ["string - Argument für die Preisverhandlung"]',
        "extra_rules": (
            "\n- Decke alle vier Kategorien gründlich ab"
            "\n- Gib 3-5 negotiationTips, die sich auf die gefundenen Risiken beziehen"
        ),
    },
}

CHECKLIST_USER = Template("$system\n\nFahrzeug-Info: $vehicle_info\n\nErstelle die Checkliste:")

# --- Voice note transcription ---

VOICE_TRANSCRIPTION = (
    "Transcribe this voice note. The speaker describes a used car they want to "
    "inspect, usually in German. Return ONLY a JSON object:\n"
    '{\n  "transcript": "string - the spoken vehicle details, verbatim"\n}\n'
    'If nothing intelligible was said, respond with {"error": "No speech detected"}.'
)
