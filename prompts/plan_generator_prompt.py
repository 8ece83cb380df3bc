"""Plan Generator Prompt."""

from langchain_core.prompts import PromptTemplate

PLAN_GENERATOR_PROMPT = PromptTemplate.from_template(
    """You are an expert strength coach and sports nutritionist. Build a weekly training plan and daily nutrition goals for the user below.

USER REQUEST:
{request}

CURRENT DAILY NUTRITION GOALS:
- Calories: {calories} kcal
- Protein: {protein_grams} g
- Carbohydrates: {carb_grams} g
- Fat: {fat_grams} g

INSTRUCTIONS:
1. Create exactly {day_count} training days (for example a Push/Pull/Legs A/B split) unless the request clearly asks for fewer.
2. Give every day a short, unique name in "dayName" (e.g. "Push A (Chest/Shoulders)").
3. For each exercise return "exercicio" (exercise name), "series" (number of sets, integer) and "reps" (repetition range as text, e.g. "8-12").
4. Use 4 to 7 exercises per day, compound movements first.
5. Set "nutritionGoals" with calories, proteinGrams, carbGrams and fatGrams as numbers. Keep calories consistent with the macros (4 kcal/g protein and carbohydrate, 9 kcal/g fat).
6. Respond with JSON only, matching this structure:
{{"nutritionGoals": {{"calories": 0, "proteinGrams": 0, "carbGrams": 0, "fatGrams": 0}},
 "workoutPlan": [{{"dayName": "", "exercises": [{{"exercicio": "", "series": 0, "reps": ""}}]}}]}}"""
)

# Structured-output schema sent with the generation request
PLAN_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "nutritionGoals": {
            "type": "OBJECT",
            "properties": {
                "calories": {"type": "NUMBER"},
                "proteinGrams": {"type": "NUMBER"},
                "carbGrams": {"type": "NUMBER"},
                "fatGrams": {"type": "NUMBER"},
            },
            "required": ["calories", "proteinGrams", "carbGrams", "fatGrams"],
        },
        "workoutPlan": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "dayName": {"type": "STRING"},
                    "exercises": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "exercicio": {"type": "STRING"},
                                "series": {"type": "INTEGER"},
                                "reps": {"type": "STRING"},
                            },
                            "required": ["exercicio", "series", "reps"],
                        },
                    },
                },
                "required": ["dayName", "exercises"],
            },
        },
    },
    "required": ["nutritionGoals", "workoutPlan"],
}


def to_json_schema(schema):
    """Rewrite an OpenAPI-style schema (upper-case type names) as JSON Schema."""
    if isinstance(schema, dict):
        return {
            key: value.lower() if key == "type" and isinstance(value, str) else to_json_schema(value)
            for key, value in schema.items()
        }
    if isinstance(schema, list):
        return [to_json_schema(item) for item in schema]
    return schema


# Same structure for chat models bound with structured output
PLAN_JSON_SCHEMA = {
    "title": "training_plan",
    "description": "Weekly workout plan and daily nutrition goals.",
    **to_json_schema(PLAN_RESPONSE_SCHEMA),
}
