"""Dev helpers: seed the catalog with sample recipes.

Seeding is idempotent: recipes whose slug already exists are skipped.
"""

import logging

from fastapi import APIRouter, Depends

from ..deps import get_repository
from ..errors import NotFound
from ..schemas import RecipeCreate, SeedOut
from ..services.recipe_repo import RecipeRepository
from ..settings import settings

router = APIRouter()
logger = logging.getLogger("recepti.dev")


def _recipe(slug, title, lead, prep, servings, difficulty, dish_group, method, tags, ingredients, steps):
    hero = f"/recipes/{slug}/hero.svg"
    return {
        "slug": slug,
        "title": title,
        "lead": lead,
        "prepTimeMinutes": prep,
        "servings": servings,
        "difficulty": difficulty,
        "dishGroup": dish_group,
        "cookingMethod": method,
        "tags": tags,
        "ingredients": [{"amount": a, "unit": u, "name": n} for a, u, n in ingredients],
        "steps": [{"text": t} for t in steps],
        "imageCdnPath": hero,
        "images": {"hero": {"cdnPath": hero}},
    }


SAMPLE_RECIPES = [
    _recipe(
        "rizi-bizi", "Riži-bizi",
        "Klasičan prilog od riže i graška, brzo i jednostavno.",
        25, 4, "EASY", "MAIN", "BOIL", ["klasik", "brzo", "prilog"],
        [(300, "g", "riža"), (200, "g", "grašak (smrznuti)"), (1, "kom", "luk"),
         (2, "žlica", "ulje"), (1, "žličica", "sol")],
        ["Na ulju kratko prodinstajte sitno sjeckani luk.",
         "Dodajte rižu, promiješajte i zalijte vodom.",
         "Pred kraj kuhanja dodajte grašak i kuhajte dok sve ne omekša."],
    ),
    _recipe(
        "cokoladni-muffini", "Čokoladni muffini",
        "Sočni muffini s puno čokolade, odlični za svaku priliku.",
        35, 12, "MEDIUM", "DESSERT", "BAKE", ["slatko", "čokolada", "muffini"],
        [(2, "kom", "jaja"), (120, "g", "šećer"), (200, "g", "brašno"), (30, "g", "kakao"),
         (150, "ml", "mlijeko"), (80, "ml", "ulje"), (120, "g", "čokoladne kapljice")],
        ["Zagrijte pećnicu na 180°C i pripremite kalup za muffine.",
         "Pomiješajte suhe sastojke, zatim dodajte mokre i kratko sjedinite.",
         "Umiješajte čokoladne kapljice i pecite 18 do 22 minute."],
    ),
    _recipe(
        "palacinke", "Palačinke",
        "Klasične tanke palačinke za slatko ili slano.",
        30, 8, "EASY", "DESSERT", "FRY", ["klasik", "brzo", "slatko"],
        [(2, "kom", "jaja"), (300, "ml", "mlijeko"), (200, "g", "brašno"),
         (1, "prstohvat", "sol")],
        ["Umutite jaja s mlijekom, dodajte brašno i sol te izmiksajte.",
         "Ostavite smjesu 10 minuta da odstoji.",
         "Pecite tanke palačinke na lagano nauljenoj tavi."],
    ),
    _recipe(
        "pileca-juha", "Pileća juha",
        "Bistra juha s povrćem, najbolja kad treba nešto toplo.",
        60, 6, "EASY", "SOUP", "BOIL", ["juha", "klasik", "comfort"],
        [(500, "g", "piletina (batak/krilca)"), (2, "kom", "mrkva"), (1, "kom", "luk"),
         (1, "kom", "celer"), (1, "žličica", "sol")],
        ["Stavite piletinu i povrće u lonac te prelijte hladnom vodom.",
         "Kuhajte na lagano 45 do 60 min i povremeno skidajte pjenu.",
         "Procijedite, začinite i poslužite s rezancima po želji."],
    ),
    _recipe(
        "tuna-salata", "Tuna salata",
        "Brza salata s tunom, kukuruzom i jogurtom.",
        15, 2, "EASY", "SALAD", "NO_COOK", ["brzo", "proteini", "salata"],
        [(1, "konz", "tuna"), (150, "g", "kukuruz"), (2, "žlica", "jogurt"),
         (1, "žlica", "maslinovo ulje")],
        ["Ocijedite tunu i kukuruz.",
         "Pomiješajte s jogurtom, uljem i limunom.",
         "Začinite po ukusu i poslužite uz salatu ili kruh."],
    ),
    _recipe(
        "domaci-kruh", "Domaći kruh",
        "Jednostavan kruh s hrskavom koricom.",
        180, 10, "MEDIUM", "BREAD", "BAKE", ["kruh", "pecenje", "domaće"],
        [(500, "g", "glatko brašno"), (7, "g", "suhi kvasac"), (320, "ml", "voda"),
         (10, "g", "sol")],
        ["Zamijesite tijesto i ostavite da se udvostruči (60 do 90 min).",
         "Oblikujte štrucu i ostavite još 30 do 45 min.",
         "Pecite 35 do 40 min na 220°C uz malo pare."],
    ),
]


@router.post("/dev/seed", response_model=SeedOut)
def seed_recipes(repo: RecipeRepository = Depends(get_repository)):
    """Create the sample recipes that don't exist yet."""
    if not settings.dev_routes_enabled:
        raise NotFound("Not found")

    created = 0
    for item in SAMPLE_RECIPES:
        if repo.get_by_slug(item["slug"]) is not None:
            continue
        repo.create(RecipeCreate.model_validate(item))
        created += 1

    logger.info(f"Seeded {created} recipes")
    return SeedOut(
        recipes_created=created,
        message=f"Created {created} recipes ({len(SAMPLE_RECIPES) - created} already present)",
    )
