"""
Prompt construction for website SEO copy and social media posts.

Each template is filled with the product name, details, language style
and source information. When the user gives a source URL but little else,
the prompt makes the fetched source page the primary information source.
"""

from typing import Optional

from .config import GeneratorConfig
from .models import ContentType, GenerationRequest, LanguageStyle
from .source_fetcher import SourcePage


NOT_PROVIDED = "(Not explicitly provided by user)"

LANGUAGE_INSTRUCTIONS = {
    LanguageStyle.ENGLISH: (
        "Generate the content strictly in English. All text fields (title, intro, "
        "sections, callToAction) must be in English. Use emojis extensively."
    ),
    LanguageStyle.BENGALI: (
        "Generate the content strictly in Bengali (বাংলা). All text fields must be "
        "in Bengali. Use emojis extensively."
    ),
    LanguageStyle.BANGLISH: (
        "Generate the content in a mix of Bengali and English (Banglish). Ensure a "
        "good balance. Use emojis extensively."
    ),
}

HASHTAG_GUIDANCE = (
    "Hashtags should always be in English, relevant to K-Beauty and the product "
    "(e.g., #SkincareRoutine, #KBeautyFinds, #GlassSkinGoal)."
)

WEBSITE_SCHEMA = """{
  "productTitle": "string (Full product name, potentially enhanced for SEO. e.g., 'Brand Name Product Name - Key Benefit')",
  "seoDescription": [
    { "type": "paragraph", "content": "string (Introductory paragraph: what the product is, main purpose, key benefits. If source extraction failed, state it here.)" },
    { "type": "heading", "level": 2, "content": "Key Features" },
    { "type": "paragraph", "content": "string (Key features as bullet points formatted as '\\n- Feature Name: Description.')" },
    { "type": "heading", "level": 2, "content": "Benefits" },
    { "type": "paragraph", "content": "string (3-5 clear benefits as bullet points formatted as '\\n- Benefit statement.')" },
    { "type": "heading", "level": 2, "content": "How to Use" },
    { "type": "paragraph", "content": "string (Clear, step-by-step usage instructions.)" },
    { "type": "heading", "level": 2, "content": "Suitable For" },
    { "type": "paragraph", "content": "string (Specific skin types and concerns this product addresses.)" },
    { "type": "heading", "level": 2, "content": "Origin" },
    { "type": "paragraph", "content": "string (e.g., 'Made in Korea'. If not found, state 'Origin not specified' or omit heading & paragraph.)" }
  ],
  "h1Headings": ["string (suggested H1 headings, max 3-5)"],
  "broadMatchKeywords": ["string (relevant broad match SEO keywords, max 5-10)"],
  "metaTitle": "string (compelling meta title, 50-60 characters, product name + primary benefit)",
  "metaDescription": "string (meta description, 150-160 characters, summarize benefits, include product name)"
}"""

SOCIAL_SCHEMA = """{{
  "title": "string (Product name with relevant emojis. Language per Selected Language Style.)",
  "intro": "string (Engaging intro, 2-3 lines, mention '{shop_name}'. If source extraction failed, state it here.)",
  "keyBenefitsSection": "string (Optional. '💎 Key Benefits' heading + bullet points '✔️ Benefit 1...'.)",
  "keyIngredientsSection": "string (Optional. '🌿 Key Ingredients' heading + '🌱 Ingredient 1...'.)",
  "howToUseSection": "string (Optional. '📌 How to Use' heading + numbered steps.)",
  "closingStatement": "string (Optional. Catchy closing, mention '{shop_name}'.)",
  "callToAction": "string (Call to action, MUST include '{shop_url}'.)",
  "hashtags": ["string (Array of 5-10 ENGLISH hashtags. {hashtag_guidance})"]
}}"""


def _quoted_or_missing(value: str) -> str:
    return f'"{value}"' if value.strip() else NOT_PROVIDED


def _source_instructions(request: GenerationRequest, source: Optional[SourcePage], subject: str) -> tuple[str, str, str]:
    """
    Build the source instruction and the product name/details lines.

    Returns:
        (source instruction, product name line, product details line)
    """
    name_line = _quoted_or_missing(request.product_name)
    details_line = _quoted_or_missing(request.product_details)

    if not request.has_source_url:
        return "", name_line, details_line

    url = request.source_url.strip()
    page_text = source.as_prompt_text() if source else "(The source page returned no readable content.)"

    if request.url_is_primary_source:
        instruction = f"""
CRITICAL INSTRUCTION: The user has provided a Product Source URL ("{url}") and minimal or no other product details.
The content of that page is included below. Your primary task is to:
1. Thoroughly analyze the source page content.
2. Extract the full product name, brand, and the details needed for {subject}.
3. Use THIS EXTRACTED INFORMATION as the main source for every field of the JSON.
4. If an image is also provided, use it as visual context to supplement or verify the page content.
5. If the Product Name below is marked "{NOT_PROVIDED}", you MUST determine it from the page.
6. If the page does not contain product information, you MUST still generate a valid JSON structure, clearly state that information could not be retrieved from the URL, and produce placeholder content. Acknowledge the limitation.

SOURCE PAGE CONTENT:
{page_text}
"""
        name_line = f'(Determine from the source page. If provided by user: "{request.product_name}")'
        details_line = f'(Determine from the source page. If provided by user: "{request.product_details}")'
    else:
        instruction = f"""A Product Source URL ("{url}") has been provided for additional context. Use its content below to enrich and supplement the details provided. If there's a conflict, prioritize explicitly provided details unless they are very sparse.

SOURCE PAGE CONTENT:
{page_text}
"""
    return instruction, name_line, details_line


def build_website_prompt(request: GenerationRequest, source: Optional[SourcePage] = None) -> str:
    """Build the prompt for a website SEO document."""
    instruction, name_line, details_line = _source_instructions(
        request, source, "a product description (features, benefits, usage, suitable skin types, origin)"
    )
    image_line = (
        "An image of the product/packaging is also provided. Use visual information from the image "
        "(text on packaging, product appearance, branding) to supplement or verify details."
        if request.image
        else "No product image provided."
    )

    return f"""
You are an expert SEO copywriter and K-Beauty enthusiast specializing in Korean beauty products.
Your goal is to generate a comprehensive, engaging, and SEO-optimized product description.
The output MUST be a valid JSON object. Do not include any text outside the JSON object, including markdown fences.

{instruction}

User Provided Inputs:
Product Name: {name_line}
Product Details: {details_line}
{image_line}

Based on ALL available information, generate the following JSON structure:
{WEBSITE_SCHEMA}

General Guidelines:
- Adopt a friendly, informative, slightly playful K-Beauty tone.
- Vary sentence structure; avoid robotic phrasing.
- All string values in JSON must be properly escaped.
- "seoDescription" array must follow the specified sequence.
- Bullet points within paragraph content strings MUST use '\\n- ' prefix.
- If information for a section is unavailable, create sensible placeholders or state that.
"""


def build_social_prompt(
    request: GenerationRequest,
    source: Optional[SourcePage] = None,
    config: Optional[GeneratorConfig] = None,
) -> str:
    """Build the prompt for a social media post."""
    config = config or GeneratorConfig()
    style = request.language_style
    instruction, name_line, details_line = _source_instructions(
        request, source, "an engaging social media post (key selling points, benefits)"
    )
    image_line = (
        "An image of the product is also provided. Use its visual cues (packaging, texture, overall vibe) "
        "to enhance the post's appeal."
        if request.image
        else "No product image provided."
    )
    schema = SOCIAL_SCHEMA.format(
        shop_name=config.shop_name,
        shop_url=config.shop_url,
        hashtag_guidance=HASHTAG_GUIDANCE,
    )

    return f"""
You are a creative social media manager for "{config.shop_name}", skilled at crafting captivating K-Beauty posts.
The output MUST be a valid JSON object. Do not include any text outside the JSON object (no markdown fences).

{instruction}

User Provided Inputs:
Product Name: {name_line}
Product Details: {details_line}
Selected Language Style: "{style.value}" ({LANGUAGE_INSTRUCTIONS[style]})
{image_line}

Key Requirements:
1. Shop Name: Naturally integrate "{config.shop_name}" (e.g., in intro or closing).
2. Website: 'callToAction' MUST include "{config.shop_url}".
3. Hashtags: ALL hashtags MUST be in ENGLISH.

Follow this JSON structure:
{schema}

Omit optional sections (empty string or no key) if not supported by available info.
Ensure valid JSON (escape newlines with \\n etc.). Tone: upbeat, friendly, persuasive.
"""


def build_prompt(
    request: GenerationRequest,
    source: Optional[SourcePage] = None,
    config: Optional[GeneratorConfig] = None,
) -> str:
    """Build the prompt for the request's content type."""
    if request.content_type == ContentType.WEBSITE:
        return build_website_prompt(request, source)
    return build_social_prompt(request, source, config)
