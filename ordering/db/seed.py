"""
Ordering Service — Bundled menu catalog

Imported into menu_items by POST /admin/inventory/import. Rows already
present (by case-insensitive name) are left untouched.
"""

MENU_CATALOG: list[dict] = [
    {
        "name": "Veg Roll",
        "category": "Rolls",
        "price": ["₹100"],
        "description": "Spiced vegetables and mint chutney wrapped in a flaky paratha.",
        "type": "veg",
        "image": "/menuimages/vegroll.png",
    },
    {
        "name": "Paneer Tikka Roll",
        "category": "Rolls",
        "price": ["₹130"],
        "description": "Tandoori paneer, onions and peppers in a paratha.",
        "type": "veg",
        "image": "/menuimages/paneer-roll.png",
    },
    {
        "name": "Chicken Roll",
        "category": "Rolls",
        "price": ["₹140"],
        "description": "Chargrilled chicken with egg and onions.",
        "type": "non-veg",
        "image": "/menuimages/chicken-roll.png",
    },
    {
        "name": "Cheese Pizza",
        "category": "Pizza",
        "price": ["₹199", "₹349"],
        "size": ["Regular", "Medium"],
        "description": "Mozzarella on a hand-stretched base.",
        "type": "veg",
        "image": "/menuimages/cheese-pizza.png",
    },
    {
        "name": "Chicken Tikka Burger",
        "category": "Burgers",
        "price": ["₹160"],
        "description": "Tikka-spiced chicken patty, lettuce and mayo.",
        "type": "non-veg",
        "image": "/menuimages/chicken-tikka-burger.png",
    },
    {
        "name": "Broasted Chicken",
        "category": "Broasted",
        "price": ["₹180", "₹340"],
        "size": ["2 pc", "4 pc"],
        "description": "Pressure-fried crisp chicken.",
        "type": "non-veg",
        "image": "/menuimages/broasted-chicken.png",
    },
    {
        "name": "Original Salted Fries",
        "category": "Fries",
        "price": ["₹90"],
        "description": "Classic salted fries.",
        "type": "veg",
        "image": "/menuimages/original-salted-fries.png",
    },
    {
        "name": "Alfredo Pasta",
        "category": "Pasta",
        "price": ["₹220"],
        "description": "Penne in a creamy white sauce.",
        "type": "veg",
        "image": "/menuimages/alfredo.jpg",
    },
    {
        "name": "Mayo Dip",
        "category": "Sauce",
        "price": ["₹20"],
        "description": "Creamy mayonnaise dip.",
        "type": "veg",
        "image": "/menuimages/mayo.png",
    },
]
