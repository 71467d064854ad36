"""Diet-tagged food catalog used by the meal planner.

Tags:
    VG  vegan (no animal products)
    V   vegetarian / lacto-veg (dairy, no eggs or meat)
    E   eggetarian (eggs and dairy, no meat or fish)
    N   non-vegetarian
"""

from dataclasses import dataclass

from fitlog.domain.profiles import (
    DIET_EGGETARIAN,
    DIET_NON_VEGETARIAN,
    DIET_UNSPECIFIED,
    DIET_VEGAN,
    DIET_VEGETARIAN,
)

ALL_TAGS = ("VG", "V", "E", "N")

ALLOWED_TAGS: dict[str, tuple[str, ...]] = {
    DIET_VEGAN: ("VG",),
    DIET_VEGETARIAN: ("VG", "V"),
    DIET_EGGETARIAN: ("VG", "V", "E"),
    DIET_NON_VEGETARIAN: ALL_TAGS,
    DIET_UNSPECIFIED: ALL_TAGS,
    "": ALL_TAGS,
}


@dataclass(frozen=True)
class PlanFood:
    """Catalog entry: a ready-made dish with its calories and protein."""

    name: str
    calories: float
    protein_g: float
    tag: str


FOOD_LIBRARY: dict[str, tuple[PlanFood, ...]] = {
    "breakfast": (
        PlanFood("Moong dal chilla (3) + green mint chutney", 310, 18, "VG"),
        PlanFood("Oats with almond milk + mixed nuts + banana", 370, 13, "VG"),
        PlanFood("Poha with peanuts, peas, and mixed veggies", 330, 12, "VG"),
        PlanFood("Whole wheat toast (2) + peanut butter + banana", 390, 15, "VG"),
        PlanFood("Idli (3) with sambar + coconut chutney", 350, 14, "VG"),
        PlanFood("Overnight oats + chia seeds + mixed berries", 320, 10, "VG"),
        PlanFood("Upma (semolina, 1 cup) + coconut chutney", 300, 10, "VG"),
        PlanFood("Besan chilla (2) with paneer filling + curd", 400, 24, "V"),
        PlanFood("Paneer bhurji (100 g) + 2 whole wheat roti", 430, 26, "V"),
        PlanFood("Greek yogurt (200 g) + granola + 1 seasonal fruit", 360, 20, "V"),
        PlanFood("Veg omelette (3 eggs) + 1 whole wheat roti", 360, 22, "E"),
        PlanFood("Sprouts salad (150 g) + 2 boiled eggs + black tea", 280, 20, "E"),
        PlanFood("Egg white omelette (4 eggs) + 2 roti + veggies", 340, 26, "E"),
        PlanFood("Chicken scramble (2 eggs + 50 g chicken) + toast", 410, 35, "N"),
        PlanFood("Tuna salad sandwich on whole wheat bread", 370, 32, "N"),
    ),
    "lunch": (
        PlanFood("Brown rice + dal + mixed sabzi + fresh salad", 530, 18, "VG"),
        PlanFood("Rajma chawal + onion-tomato-cucumber salad", 550, 22, "VG"),
        PlanFood("Quinoa + chickpea salad bowl with roasted veggies", 480, 20, "VG"),
        PlanFood("Tofu stir-fry (150 g) + 1 cup brown rice + salad", 440, 24, "VG"),
        PlanFood("Chana masala + 2 roti + onion salad", 520, 22, "VG"),
        PlanFood("2 chapati + dal + paneer bhurji (80 g) + salad", 560, 28, "V"),
        PlanFood("Chole masala + 2 roti + cucumber raita", 580, 24, "V"),
        PlanFood("Palak paneer (200 g) + 2 roti + cucumber salad", 500, 22, "V"),
        PlanFood("Dal makhani + 1 cup rice + 1 roti + salad", 540, 20, "V"),
        PlanFood("Egg curry (2 eggs) + 2 whole wheat roti + salad", 470, 26, "E"),
        PlanFood("Grilled chicken (150 g) + 1 cup brown rice + sabzi", 520, 38, "N"),
        PlanFood("Fish curry (150 g) + 1 cup rice + salad", 490, 34, "N"),
    ),
    "dinner": (
        PlanFood("2 whole wheat roti + plain dal + mixed vegetables", 440, 16, "VG"),
        PlanFood("Vegetable soup + 2 roti + sabzi", 390, 14, "VG"),
        PlanFood("Tofu stir-fry (150 g) + 2 roti + salad", 440, 24, "VG"),
        PlanFood("Lentil soup + roasted sweet potato + green salad", 410, 18, "VG"),
        PlanFood("Chana masala (150 g) + 2 roti + onion salad", 430, 20, "VG"),
        PlanFood("Moong dal khichdi + curd + pickle", 400, 18, "V"),
        PlanFood("Dal tadka + 2 roti + cucumber raita", 430, 18, "V"),
        PlanFood("Paneer tikka (100 g) + 1 roti + green salad", 420, 24, "V"),
        PlanFood("Egg fried rice (2 eggs) + stir-fry vegetables", 460, 22, "E"),
        PlanFood("Grilled chicken (150 g) + roasted veggies + quinoa", 460, 40, "N"),
        PlanFood("Chicken soup + 2 slices whole wheat bread", 380, 30, "N"),
        PlanFood("Fish tikka (150 g) + 1 cup brown rice + salad", 450, 35, "N"),
    ),
    "snacks": (
        PlanFood("Mixed nuts and seeds (30 g) + 1 seasonal fruit", 220, 6, "VG"),
        PlanFood("Roasted chana (40 g) + lemon + chaat masala", 160, 10, "VG"),
        PlanFood("Sprouts chaat (100 g) + tomato + onion", 150, 10, "VG"),
        PlanFood("Banana + 1 tbsp peanut butter", 210, 7, "VG"),
        PlanFood("Hummus (3 tbsp) + cucumber and carrot sticks", 170, 7, "VG"),
        PlanFood("Rice cakes (3) + almond butter", 200, 6, "VG"),
        PlanFood("Edamame (100 g) + sea salt", 120, 11, "VG"),
        PlanFood("Greek yogurt (150 g) + drizzle of honey", 180, 14, "V"),
        PlanFood("Paneer cubes (60 g) + cucumber sticks + lemon", 140, 12, "V"),
        PlanFood("Cottage cheese (100 g) + berries + chia seeds", 175, 14, "V"),
        PlanFood("Protein shake (1 scoop whey) + 200 ml milk", 210, 28, "V"),
        PlanFood("2 boiled eggs + rock salt + pepper", 155, 13, "E"),
        PlanFood("Egg whites (4) + bell pepper stir-fry", 120, 18, "E"),
    ),
}
