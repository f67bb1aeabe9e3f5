# streamlit_app.py
from __future__ import annotations

from datetime import date
from typing import Dict, Optional

import streamlit as st

from hw_types.housewarming_types import MAX_ADULTS, MAX_CHILDREN, GiftItem, make_config_request, make_gift_request
from services.app import HousewarmingApp, build_app
from services.config_service import parse_iso_date
from services.errors import (
    AuthFailure,
    AuthorizationError,
    ConflictError,
    GiftNotFoundError,
    ValidationError,
)
from utils.helpers import first_name, mask_phone, safe_int
from utils.images import encode_uploaded_file
from utils.pdf_export import build_guest_list_pdf
from utils.settings import configure_logging, load_settings
from utils.storage import JsonFileStore
from utils.weather_api import format_weather_line

# ───────────────────────── Settings ─────────────────────────
SETTINGS = load_settings()
configure_logging(SETTINGS.log_level)

FIELD_LABELS: Dict[str, str] = {
    "contact": "Telefone",
    "name": "Nome",
    "adults": "Adultos",
    "children": "Crianças",
    "description": "Descrição",
    "image_url": "Imagem",
    "link": "Link da loja",
    "event_date": "Data",
    "event_time": "Hora",
    "rsvp_deadline": "Prazo",
    "location": "Endereço",
    "location_link": "Link do mapa",
}


@st.cache_resource(show_spinner=False)
def get_store() -> JsonFileStore:
    return JsonFileStore(SETTINGS.data_dir)


def get_app() -> HousewarmingApp:
    # Rebuilt on every rerun so each run starts from what is on disk.
    return build_app(store=get_store(), settings=SETTINGS)


@st.cache_data(ttl=60 * 60 * 2, show_spinner=False)
def event_weather(location: str, event_date: str, event_time: str) -> Optional[str]:
    when = parse_iso_date(event_date)
    if when is None:
        return None
    return format_weather_line(location, when, target_hour_local=safe_int(event_time[:2], 18))


def show_validation(err: ValidationError) -> None:
    for field, message in err.errors.items():
        label = FIELD_LABELS.get(field, field)
        st.error(f"{label}: {message}")


def fmt_date(value: str) -> str:
    d = parse_iso_date(value)
    return d.strftime("%d/%m/%Y") if d else value


# ───────────────────────── Page ─────────────────────────
st.set_page_config(page_title="Nosso Novo Lar", page_icon="🏠", layout="centered")
app = get_app()
guest = app.identity.current

# ───────────────────────── Sidebar: sessions ─────────────────────────
with st.sidebar:
    if guest:
        st.markdown(f"👋 Olá, **{guest.name}**")
        st.caption(guest.contact)
        if st.button("Sair", use_container_width=True):
            app.identity.sign_out()
            st.rerun()

    st.divider()
    if app.admin.is_admin:
        st.success("Modo administrador")
        if st.button("Encerrar sessão admin", use_container_width=True):
            app.admin.revoke()
            st.rerun()
    else:
        with st.expander("🔒 Acesso dos anfitriões"):
            with st.form("admin_login", clear_on_submit=True):
                passphrase = st.text_input("Senha", type="password")
                if st.form_submit_button("Entrar"):
                    try:
                        app.admin.login(passphrase)
                        st.rerun()
                    except AuthFailure as e:
                        st.error(str(e))

# ───────────────────────── Identity gate ─────────────────────────
if guest is None and not app.admin.is_admin:
    st.title("🏠 Bem-vindos!")
    st.write("Ficamos muito felizes em celebrar nossa nova casa com você. Como podemos te identificar?")

    # Outside a form so every change reruns the lookup.
    raw_contact = st.text_input("Telefone / WhatsApp (ID único)", placeholder="(00) 00000-0000", key="identity_contact")
    contact = mask_phone(raw_contact)
    if raw_contact and contact != raw_contact:
        st.caption(f"Usaremos: {contact}")

    known_name = app.identity.lookup(contact)
    if known_name:
        st.text_input("Seu nome registrado", value=known_name, disabled=True, key="identity_known_name")
        st.caption(f"✓ Já conhecemos você, {first_name(known_name)}!")
        typed_name = known_name
    else:
        typed_name = st.text_input("Seu nome completo", placeholder="Ex: Maria Clara", key="identity_name")

    if st.button("Entrar" if known_name else "Começar", type="primary", use_container_width=True):
        try:
            app.identity.submit_identity(typed_name, contact)
            st.rerun()
        except ValidationError as e:
            show_validation(e)
    st.stop()

# ───────────────────────── Header ─────────────────────────
st.title("🏠 Nosso Novo Lar")
st.write("Sua presença é o nosso maior presente. Criamos esta lista para compartilhar com vocês nossos planos para o novo lar.")

progress = app.gifts.progress()
st.markdown(f"**{progress.percent}% dos itens preparados** · {progress.reserved} / {progress.total} presentes")
st.progress(progress.percent)

tab_names = ["🏠 Evento & Presença", "✨ Lista de Presentes"]
my_gifts = app.gifts.reserved_by(guest.name if guest else None)
if guest and not app.admin.is_admin:
    tab_names.append(f"🤍 Meus Escolhidos ({len(my_gifts)})")
if app.admin.is_admin:
    tab_names.append("🛠️ Painel Admin")
tabs = dict(zip(tab_names, st.tabs(tab_names)))


# ───────────────────────── Render helpers ─────────────────────────
def render_gift_card(gift: GiftItem, key_prefix: str) -> None:
    with st.container(border=True):
        col_img, col_body = st.columns([1, 2])
        with col_img:
            st.image(gift.image_url, use_container_width=True)
        with col_body:
            st.markdown(f"### {gift.name}")
            st.write(gift.description)
            if gift.link:
                st.markdown(f"[🛒 Ver na loja]({gift.link})")

            if gift.is_reserved:
                st.info(f"Reservado por **{gift.reserved_by}**")

            col_a, col_b = st.columns(2)
            with col_a:
                if not gift.is_reserved and guest and not app.admin.is_admin:
                    if st.button("Quero presentear", key=f"{key_prefix}_reserve_{gift.id}", type="primary"):
                        try:
                            app.gifts.reserve(gift.id, guest)
                            st.rerun()
                        except (ConflictError, GiftNotFoundError) as e:
                            st.warning(str(e))
                elif gift.is_reserved and app.admin.is_admin:
                    if st.button("Liberar", key=f"{key_prefix}_release_{gift.id}"):
                        app.gifts.cancel(gift.id)
                        st.rerun()
                elif gift.is_reserved and guest and gift.reserved_by == guest.name:
                    if st.button("Cancelar", key=f"{key_prefix}_cancel_{gift.id}"):
                        try:
                            app.gifts.cancel(gift.id, by_guest=guest)
                            st.rerun()
                        except (AuthorizationError, GiftNotFoundError) as e:
                            st.warning(str(e))
            with col_b:
                if app.admin.is_admin:
                    if st.button("Remover", key=f"{key_prefix}_remove_{gift.id}"):
                        app.gifts.remove_item(gift.id)
                        st.rerun()


# ───────────────────────── Tab: event & RSVP ─────────────────────────
with tabs["🏠 Evento & Presença"]:
    config = app.config.current
    st.subheader("O Evento")
    st.markdown(f"📅 **{fmt_date(config.event_date)}** às **{config.event_time}**")
    st.markdown(f"📍 {config.location}")

    col_map, col_cal = st.columns(2)
    with col_map:
        if config.location_link:
            st.link_button("🗺️ Ver no mapa", config.location_link, use_container_width=True)
    with col_cal:
        if config.google_calendar_link:
            st.link_button("📆 Adicionar à agenda", config.google_calendar_link, use_container_width=True)

    if SETTINGS.weather_enabled:
        line = event_weather(config.location, config.event_date, config.event_time)
        if line:
            st.info(f"🌤️ {line}")

    st.divider()
    st.subheader("Confirme sua presença")
    if app.config.is_past_deadline():
        st.warning(
            f"O período de reservas encerrou em {fmt_date(config.rsvp_deadline)}. "
            "Caso precise falar conosco, entre em contato!"
        )
    elif guest is None:
        st.info("Identifique-se como convidado para confirmar presença.")
    else:
        mine = app.attendance.find(guest.contact)
        if mine:
            if mine.attending:
                st.success(f"Presença confirmada: {mine.adults_count} adulto(s) e {mine.children_count} criança(s).")
            else:
                st.info("Você avisou que não poderá vir. Pode mudar de ideia abaixo.")

        with st.form("rsvp_form"):
            attending = st.radio(
                "Você vem?",
                options=[True, False],
                format_func=lambda v: "Sim, estarei lá!" if v else "Infelizmente não poderei ir",
                index=0 if (mine is None or mine.attending) else 1,
                horizontal=True,
            )
            col_ad, col_ch = st.columns(2)
            with col_ad:
                adults = st.number_input("Adultos", min_value=0, max_value=MAX_ADULTS, step=1,
                                         value=max(1, mine.adults_count) if mine else 1)
            with col_ch:
                children = st.number_input("Crianças", min_value=0, max_value=MAX_CHILDREN, step=1,
                                           value=mine.children_count if mine else 0)
            submitted = st.form_submit_button("Atualizar resposta" if mine else "Confirmar", type="primary")

        if submitted:
            try:
                app.attendance.submit(guest.contact, guest.name, attending, int(adults), int(children))
                st.rerun()
            except ValidationError as e:
                show_validation(e)
        st.caption(f"Data limite: {fmt_date(config.rsvp_deadline)}")

# ───────────────────────── Tab: gifts ─────────────────────────
with tabs["✨ Lista de Presentes"]:
    if not app.gifts.items:
        st.info("🥂 Em breve teremos novidades aqui...")
    for gift in app.gifts.items:
        render_gift_card(gift, "list")

# ───────────────────────── Tab: my gifts ─────────────────────────
if guest and not app.admin.is_admin:
    with tabs[tab_names[2]]:
        st.subheader("Sua Generosidade")
        if my_gifts:
            for gift in my_gifts:
                render_gift_card(gift, "mine")
        else:
            st.info("🤍 Nenhum item selecionado por enquanto.")

# ───────────────────────── Tab: admin ─────────────────────────
if app.admin.is_admin:
    with tabs["🛠️ Painel Admin"]:
        summary = app.attendance.summary()
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Convidados totais", summary.total_attendees)
        c2.metric("Adultos", summary.total_adults)
        c3.metric("Crianças", summary.total_children)
        c4.metric("Ausências", summary.total_declines)

        st.subheader("⚙️ Configuração do Evento")
        config = app.config.current
        with st.form("config_form"):
            col_d, col_t = st.columns(2)
            with col_d:
                event_date = st.date_input("Data", value=parse_iso_date(config.event_date) or date.today())
            with col_t:
                event_time = st.text_input("Hora", value=config.event_time)
            rsvp_deadline = st.date_input("Prazo de confirmação", value=parse_iso_date(config.rsvp_deadline) or date.today())
            location = st.text_input("Endereço", value=config.location)
            location_link = st.text_input("Link do mapa", value=config.location_link or "")
            calendar_link = st.text_input("Link do Google Agenda", value=config.google_calendar_link)
            if st.form_submit_button("Salvar configuração"):
                try:
                    app.config.update(make_config_request(
                        event_date=event_date.isoformat(),
                        event_time=event_time,
                        rsvp_deadline=rsvp_deadline.isoformat(),
                        location=location,
                        location_link=location_link,
                        google_calendar_link=calendar_link,
                    ))
                    st.success("Configuração salva.")
                except ValidationError as e:
                    show_validation(e)

        st.subheader("🎁 Novo presente")
        with st.form("gift_form", clear_on_submit=True):
            name = st.text_input("Nome")
            description = st.text_area("Descrição")
            image_url = st.text_input("URL da imagem (opcional)")
            upload = st.file_uploader("…ou envie uma foto", type=["png", "jpg", "jpeg", "webp"])
            link = st.text_input("Link da loja (opcional)")
            if st.form_submit_button("Adicionar"):
                try:
                    encoded = encode_uploaded_file(upload)
                    app.gifts.add_item(make_gift_request(
                        name=name,
                        description=description,
                        image_url=encoded or image_url,
                        link=link,
                    ))
                    st.rerun()
                except ValidationError as e:
                    show_validation(e)

        st.subheader("👥 Lista de convidados")
        records = app.attendance.records
        if records:
            st.dataframe(
                [
                    {
                        "Nome": r.name,
                        "Telefone": r.contact,
                        "Vem?": "Sim" if r.attending else "Não",
                        "Adultos": r.adults_count,
                        "Crianças": r.children_count,
                        "Total": r.total_guests,
                        "Respondido em": r.submitted_at[:16].replace("T", " "),
                    }
                    for r in records
                ],
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.info("Nenhuma resposta até agora.")

        pdf_bytes = build_guest_list_pdf("Nosso Novo Lar - Lista de Convidados", app.config.current, records)
        st.download_button(
            label="⬇️ Baixar lista em PDF",
            data=pdf_bytes,
            file_name=f"convidados_{app.config.current.event_date}.pdf",
            mime="application/pdf",
            use_container_width=True,
        )

