"""Default profile content created on a user's first access."""

from typing import Any, Dict, List

# Push/Pull/Legs A/B split, six training days
DEFAULT_WORKOUT_PLAN: Dict[str, List[Dict[str, Any]]] = {
    "Push A (Foco Peito/Ombro)": [
        {"name": "Supino Reto (Barra ou Halteres)", "target_sets": 4, "target_reps": "6-10"},
        {"name": "Supino Inclinado (Halteres)", "target_sets": 3, "target_reps": "8-12"},
        {"name": "Crucifixo (Polia ou Máquina)", "target_sets": 3, "target_reps": "10-15"},
        {"name": "Elevação Lateral (Halteres)", "target_sets": 4, "target_reps": "10-15"},
        {"name": "Tríceps Corda (Polia)", "target_sets": 3, "target_reps": "10-15"},
    ],
    "Pull A (Foco Dorsal/Bíceps)": [
        {"name": "Puxada Alta (Polia - Frente)", "target_sets": 4, "target_reps": "8-12"},
        {"name": "Remada Curvada (Barra)", "target_sets": 3, "target_reps": "8-12"},
        {"name": "Rosca Direta (Barra)", "target_sets": 3, "target_reps": "8-12"},
        {"name": "Rosca Martelo (Halteres)", "target_sets": 3, "target_reps": "10-15"},
    ],
    "Legs A (Foco Quadríceps)": [
        {"name": "Agachamento Livre (ou Hack Machine)", "target_sets": 4, "target_reps": "6-10"},
        {"name": "Leg Press 45", "target_sets": 3, "target_reps": "10-12"},
        {"name": "Cadeira Extensora", "target_sets": 3, "target_reps": "12-15"},
        {"name": "Panturrilha em Pé (Máquina)", "target_sets": 4, "target_reps": "10-15"},
    ],
    "Push B (Foco Ombros/Tríceps)": [
        {"name": "Desenvolvimento de Ombros (Halteres)", "target_sets": 4, "target_reps": "6-10"},
        {"name": "Supino Fechado (Barra)", "target_sets": 3, "target_reps": "8-12"},
        {"name": "Elevação Lateral (Polia)", "target_sets": 3, "target_reps": "12-15"},
        {"name": "Tríceps Francês Unilateral (Halter)", "target_sets": 3, "target_reps": "10-15"},
    ],
    "Pull B (Foco Espessura/Trapézio)": [
        {"name": "Remada Cavalinho (T-Bar)", "target_sets": 4, "target_reps": "6-10"},
        {"name": "Remada Baixa (Polia)", "target_sets": 3, "target_reps": "8-12"},
        {"name": "Encolhimento (Halteres)", "target_sets": 3, "target_reps": "10-15"},
        {"name": "Rosca Inversa (Polia ou Barra)", "target_sets": 3, "target_reps": "10-15"},
    ],
    "Legs B (Foco Posterior/Glúteo)": [
        {"name": "Levantamento Terra (ou Stiff)", "target_sets": 4, "target_reps": "5-8"},
        {"name": "Mesa Flexora", "target_sets": 3, "target_reps": "10-12"},
        {"name": "Elevação Pélvica (Barra)", "target_sets": 3, "target_reps": "8-12"},
        {"name": "Panturrilha Sentado (Máquina)", "target_sets": 4, "target_reps": "12-20"},
    ],
}

DEFAULT_NUTRITION_GOALS: Dict[str, float] = {
    "calories": 3200,
    "protein_grams": 160,
    "carb_grams": 460,
    "fat_grams": 80,
}
