"""
Prompts for nutrition analysis.

System prompt is static; request-specific content goes in the user message.
"""

from typing import Any, Dict, List, Optional


# ═══════════════════════════════════════════════════════════
# SYSTEM PROMPT (static instructions)
# ═══════════════════════════════════════════════════════════

NUTRITION_SYSTEM_PROMPT = """You are a professional nutritionist and food analyst. Your task is to:
1. Carefully analyze the food image or description provided
2. Identify the exact type of food, cooking method, and main ingredients
3. For different types of dishes:
   - Salads: identify greens, vegetables, proteins, dressings, toppings
   - Stir-fries: identify proteins, vegetables, sauce type, accompaniments (rice/noodles)
   - Main courses: identify primary protein, starches, vegetables, cooking method
   - Snacks: identify main components and preparation method
   - Desserts: identify main ingredients and type
   - Beverages: identify base and additions
4. Calculate precise nutritional content for the specified portion size
5. Return ONLY a JSON response in this exact format:
{
    "calories": integer,
    "protein": integer,
    "carbs": integer,
    "fat": integer,
    "details": "precise 2-4 word description"
}

IMPORTANT RULES:
- The 'details' field must be a precise 2-4 word description (e.g., "Grilled Chicken Salad", "Vegetable Stir-Fry Rice")
- All nutritional values must be integers
- Be very precise with nutritional calculations
- Adjust values based on portion size
- Consider ALL ingredients, including oils, sauces, and dressings
- If you see rice or noodles, ALWAYS include them in the description
- For stir-fries, always specify if served with rice/noodles
- Base nutritional calculations on realistic portion sizes
"""


# ═══════════════════════════════════════════════════════════
# USER PROMPTS (dynamic content)
# ═══════════════════════════════════════════════════════════


def image_data_uri(image_base64: str) -> str:
    """Wrap base64 JPEG bytes in a data URI."""
    return f"data:image/jpeg;base64,{image_base64}"


def get_user_prompt(
    amount_grams: int,
    name: str = "",
    image_base64: Optional[str] = None,
) -> str:
    """
    Build the user message text.

    Args:
        amount_grams: Portion size
        name: Food name (used only without image)
        image_base64: Optimized JPEG as base64

    Returns:
        User prompt string

    Example:
        >>> get_user_prompt(200, name="pasta")
        'Analyze nutritional information for 200g of pasta'
    """
    if image_base64 is not None:
        return (
            f"Analyze nutritional information for {amount_grams}g of food "
            f"in this image: {image_data_uri(image_base64)}"
        )
    return f"Analyze nutritional information for {amount_grams}g of {name.strip()}"


def build_messages(
    amount_grams: int,
    name: str = "",
    image_base64: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """System + user messages for a chat completion."""
    return [
        {"role": "system", "content": NUTRITION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": get_user_prompt(amount_grams, name=name, image_base64=image_base64),
        },
    ]
