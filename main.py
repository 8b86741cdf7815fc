"""Simple entrypoint to run the outfit composer against a demo wardrobe."""

import json

from composer_app.app import OutfitComposerApp

DEMO_WARDROBE = [
    {"id": "tee-white", "category": "tops", "colors": ["white"], "texture": "cotton", "formality": "casual", "cost": 1500},
    {"id": "jeans-navy", "category": "bottoms", "colors": ["navy"], "texture": "smooth", "formality": "casual", "cost": 4000},
    {"id": "jacket-gray", "category": "outerwear", "colors": ["gray"], "texture": "wool", "formality": "smart_casual", "cost": 9000},
    {"id": "sneakers-white", "category": "shoes", "colors": ["white"], "texture": "smooth", "formality": "casual", "cost": 6000},
    {"id": "scarf-red", "category": "accessories", "colors": ["red"], "texture": "knit", "formality": "casual", "cost": 1200},
]


def main() -> None:
    app = OutfitComposerApp()
    response = app.generate_outfits(
        userId="demo",
        items=DEMO_WARDROBE,
        constraints={"occasion": "weekend brunch", "weather": {"temperature": 8, "precipitation": 0.0}},
    )
    print(json.dumps(response, indent=2))


if __name__ == "__main__":
    main()
