"""Prompts and response schemas sent to Gemini for each content type."""

from app.models.content import ContentType, GenerationRequest

PRODUCT_DESCRIPTION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "descriptions": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "An array of 2-3 different product descriptions.",
        },
        "seo": {
            "type": "OBJECT",
            "properties": {
                "metaTitle": {"type": "STRING", "description": "An SEO-optimized meta title."},
                "metaDescription": {"type": "STRING", "description": "An SEO-optimized meta description."},
                "keywords": {
                    "type": "ARRAY",
                    "items": {"type": "STRING"},
                    "description": "An array of relevant SEO keywords.",
                },
            },
            "required": ["metaTitle", "metaDescription", "keywords"],
        },
        "featureBullets": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "3-5 compelling bullet points highlighting key features and benefits.",
        },
        "targetAudience": {"type": "STRING", "description": "A brief description of the ideal target audience."},
        "callToActions": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "2-3 strong call-to-action phrases.",
        },
        "hashtags": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Relevant social media hashtags, without the '#' symbol.",
        },
    },
    "required": ["descriptions", "seo", "featureBullets", "targetAudience", "callToActions", "hashtags"],
}

SOCIAL_MEDIA_POST_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "socialMediaPosts": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "An array of 2-3 distinct and engaging social media posts about the product.",
        }
    },
    "required": ["socialMediaPosts"],
}


def social_media_prompt(request: GenerationRequest) -> str:
    return (
        "You are a professional social media manager specializing in e-commerce.\n"
        "Your task is to create engaging social media posts for a product.\n\n"
        "Product Information:\n"
        f"- Product Name: {request.productName}\n"
        f"- Details/Keywords: {request.description}\n\n"
        "Instructions:\n"
        "1. Generate 2-3 short, catchy, and distinct social media posts.\n"
        "2. Incorporate relevant emojis and a call-to-action in each post.\n"
        f"3. Adopt a '{request.tone}' tone of voice.\n"
        f"4. Ensure all content is in the specified language: '{request.language}'.\n"
    )


def product_description_prompt(request: GenerationRequest) -> str:
    image_line = (
        "- An image of the product is also provided for visual analysis.\n"
        if request.imageData
        else ""
    )
    return (
        "You are an expert e-commerce copywriter, SEO specialist, and marketing strategist.\n"
        "Your task is to analyze product information (and an optional image) to generate a complete marketing kit.\n\n"
        "Analyze this product:\n"
        f"- Product Name: {request.productName}\n"
        f"- Existing Description / Details / Keywords: {request.description}\n"
        f"{image_line}\n"
        "Instructions:\n"
        "1. **Product Descriptions:** Generate 2-3 distinct and engaging product descriptions.\n"
        "2. **SEO Metadata:** Create an SEO-friendly meta title, meta description, and keywords list.\n"
        "3. **Feature Bullets:** Write 3-5 compelling bullet points, linking features to benefits.\n"
        "4. **Target Audience:** Briefly describe the ideal customer.\n"
        "5. **Call to Actions (CTAs):** Suggest 2-3 strong, action-oriented phrases.\n"
        "6. **Social Media Hashtags:** Provide relevant hashtags (without the '#').\n"
        f"7. **Tone and Language:** Adopt a '{request.tone}' tone and write everything in '{request.language}'.\n"
    )


def build_prompt(request: GenerationRequest):
    """Return ``(prompt, response_schema)`` for the request's content type."""
    if request.contentType == ContentType.SOCIAL_MEDIA_POST:
        return social_media_prompt(request), SOCIAL_MEDIA_POST_SCHEMA
    return product_description_prompt(request), PRODUCT_DESCRIPTION_SCHEMA
