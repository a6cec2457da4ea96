from __future__ import annotations

import streamlit as st

from fitplan.domains.workout.schemas import DayPlan
from ui.client import DEFAULT_BACKEND_URL, PlanClient, PlanClientError, WeekBoard

LEVELS = ["Principiante", "Intermedio", "Avanzado"]

# -------------------------------------------------
# Session State
# -------------------------------------------------
if "board" not in st.session_state:
    st.session_state.board = WeekBoard()
if "client" not in st.session_state:
    st.session_state.client = PlanClient(base_url=DEFAULT_BACKEND_URL)
if "error" not in st.session_state:
    st.session_state.error = None
if "editing_day" not in st.session_state:
    st.session_state.editing_day = None

board: WeekBoard = st.session_state.board
client: PlanClient = st.session_state.client


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def _exercise_line(ex) -> str:
    if ex.reps:
        return f"**{ex.name}** · {ex.sets} series x {ex.reps} reps"
    return f"**{ex.name}** · {ex.sets} series x {ex.time_per_set_minutes:g} min"


def render_day(plan: DayPlan) -> None:
    with st.container(border=True):
        st.subheader(plan.day)
        st.caption(f"{plan.workout.type} · {plan.workout.duration_minutes:g} min")
        st.markdown(f"**Calentamiento:** {plan.warmup}")
        for ex in plan.workout.exercises:
            st.markdown(f"- {_exercise_line(ex)}")
        st.markdown(f"**Enfriamiento:** {plan.cooldown}")

        col1, col2 = st.columns(2)
        if col1.button("Regenerar", key=f"regen-{plan.day}"):
            regenerate(plan.day)
            st.rerun()
        if col2.button("Editar", key=f"edit-{plan.day}"):
            st.session_state.editing_day = plan.day
            st.rerun()


def regenerate(day: str) -> None:
    st.session_state.error = None
    with st.spinner(f"Regenerando {day}..."):
        try:
            board.replace(
                client.regenerate_day(day, st.session_state.goals, st.session_state.level, st.session_state.equipment)
            )
        except PlanClientError as e:
            st.session_state.error = str(e)


def generate(use_stream: bool) -> None:
    st.session_state.error = None
    board.clear()
    goals = st.session_state.goals
    level = st.session_state.level
    equipment = st.session_state.equipment

    try:
        if use_stream:
            placeholder = st.empty()
            for plan in client.iter_week(goals, level, equipment):
                board.add(plan)
                placeholder.info(f"Generado: {', '.join(board.labels())}")
            placeholder.empty()
        else:
            with st.spinner("Generando tu plan semanal..."):
                board.load(client.generate_week(goals, level, equipment))
    except PlanClientError as e:
        # semana incompleta -> se descarta entera
        board.clear()
        st.session_state.error = str(e)


def submit_edit(day: str, instructions: str) -> None:
    plan = board.get(day)
    if plan is None or not instructions.strip():
        return
    st.session_state.error = None
    with st.spinner(f"Editando {day}..."):
        try:
            board.replace(
                client.edit_day(
                    plan,
                    instructions,
                    goals=st.session_state.goals,
                    level=st.session_state.level,
                    equipment=st.session_state.equipment,
                )
            )
            st.session_state.editing_day = None
        except PlanClientError as e:
            st.session_state.error = str(e)


# -------------------------------------------------
# Page
# -------------------------------------------------
st.set_page_config(page_title="Plan de Entrenamiento IA", layout="wide")
st.title("Plan de Entrenamiento IA")
st.caption("Personaliza tu plan de entrenamiento según tus objetivos y preferencias.")

with st.form("goals-form"):
    st.text_area("Objetivos", key="goals", placeholder="Describe tus objetivos de fitness...")
    st.selectbox("Nivel", LEVELS, index=1, key="level")
    st.text_input("Equipo disponible", key="equipment", placeholder="mancuernas, banda elástica...")
    use_stream = st.toggle("Mostrar los días a medida que se generan", value=True)
    if st.form_submit_button("Generar plan", type="primary") and st.session_state.goals.strip():
        generate(use_stream)

if st.session_state.error:
    st.error(st.session_state.error)

if client.rejected:
    st.warning(f"Se descartaron {len(client.rejected)} respuestas con formato inválido.")

editing = st.session_state.editing_day
if editing:
    with st.form("edit-form"):
        st.markdown(f"### Editar plan: {editing}")
        instructions = st.text_area("Instrucciones", placeholder="Ej.: añade 10 minutos de cardio")
        c1, c2 = st.columns(2)
        if c1.form_submit_button("Guardar cambios"):
            submit_edit(editing, instructions)
            st.rerun()
        if c2.form_submit_button("Cancelar"):
            st.session_state.editing_day = None
            st.rerun()

cols = st.columns(2)
for i, plan in enumerate(board.days):
    with cols[i % 2]:
        render_day(plan)
