TONES = [
    {"value": "professional", "label": "Professional"},
    {"value": "friendly", "label": "Friendly"},
    {"value": "creative", "label": "Creative"},
    {"value": "premium", "label": "Premium / Luxury"},
    {"value": "witty", "label": "Witty / Humorous"},
    {"value": "persuasive", "label": "Persuasive"},
    {"value": "technical", "label": "Technical / Informative"},
    {"value": "playful", "label": "Playful"},
    {"value": "formal", "label": "Formal"},
    {"value": "empathetic", "label": "Empathetic"},
]

LANGUAGES = [
    {"value": "en", "label": "English (EN)"},
    {"value": "vi", "label": "Vietnamese (VI)"},
    {"value": "es", "label": "Spanish (ES)"},
    {"value": "jp", "label": "Japanese (JP)"},
    {"value": "de", "label": "German (DE)"},
]

# Column order of every bulk export
EXPORT_COLUMNS = [
    "product_name",
    "description",
    "generated_description_1",
    "generated_description_2",
    "generated_description_3",
    "meta_title",
    "meta_description",
    "keywords",
    "error",
]

REQUIRED_COLUMNS = ["product_name", "description"]

QUOTA_MESSAGE = "You have reached your free usage limit for this account."
LOGIN_MESSAGE = "Please log in to generate content."
EMPTY_FILE_MESSAGE = (
    'File is empty or invalid. Make sure it contains "product_name" and "description" columns.'
)

TEMPLATE_CSV = (
    "product_name,description\n"
    'Smart Thermos Bottle,"Keeps drinks hot for 12 hours, LED temperature display, 500ml capacity"\n'
)
