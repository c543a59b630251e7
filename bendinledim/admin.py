from flask import Blueprint, flash, redirect, render_template, request, url_for

from .errors import ValidationError
from .repository import get_repository
from .text import collapse_ws, estimate_read_time

admin_bp = Blueprint("admin", __name__, template_folder="templates")

CHECKBOXES = ("published", "featured", "editors_pick")


def _form_fields():
    f = request.form
    content = f.get("content") or ""
    fields = {
        "title": (f.get("title") or "").strip(),
        "title_en": (f.get("title_en") or "").strip() or None,
        "content": content,
        "content_en": f.get("content_en") or None,
        "excerpt": (f.get("excerpt") or "").strip() or collapse_ws(content)[:200],
        "image_url": (f.get("image_url") or "").strip() or None,
        "author": (f.get("author") or "").strip() or "Editör Ekibi",
        "read_time": f.get("read_time", type=int) or estimate_read_time(content),
        "category_id": (f.get("category_id") or "").strip(),
    }
    for name in CHECKBOXES:
        fields[name] = f.get(name) == "on"
    return fields


def _missing(fields):
    return [name for name in ("title", "content", "category_id") if not fields[name] or not str(fields[name]).strip()]


def _edit_page(article, status=200):
    repo = get_repository()
    return render_template(
        "admin_edit.html",
        article=article,
        categories=repo.list_categories(),
        tags=[t for t, _ in repo.tags_with_counts()],
        form=request.form,
    ), status


@admin_bp.get("/")
def dashboard():
    listing = get_repository().list_articles(include_unpublished=True, limit=100)
    return render_template("admin.html", items=listing["articles"], total=listing["total"])


@admin_bp.route("/new", methods=["GET", "POST"])
def new_article():
    if request.method == "POST":
        fields = _form_fields()
        missing = _missing(fields)
        if missing:
            flash("Zorunlu alanlar eksik: " + ", ".join(missing), "error")
            return _edit_page(None, 400)
        try:
            a = get_repository().create_article(tag_ids=request.form.getlist("tag_ids"), **fields)
        except ValidationError as e:
            flash(e.message, "error")
            return _edit_page(None, 400)
        flash(f"Oluşturuldu: {a.title}", "success")
        return redirect(url_for("admin.dashboard"))
    return _edit_page(None)


@admin_bp.route("/<slug>/edit", methods=["GET", "POST"])
def edit_article(slug):
    repo = get_repository()
    a = repo.require_article(slug)
    if request.method == "POST":
        fields = _form_fields()
        missing = _missing(fields)
        if missing:
            flash("Zorunlu alanlar eksik: " + ", ".join(missing), "error")
            return _edit_page(a, 400)
        try:
            repo.update_article(slug, fields, tag_ids=request.form.getlist("tag_ids"))
        except ValidationError as e:
            flash(e.message, "error")
            return _edit_page(a, 400)
        flash("Kaydedildi", "success")
        return redirect(url_for("admin.dashboard"))
    return _edit_page(a)


@admin_bp.post("/<slug>/delete")
def delete_article(slug):
    get_repository().delete_article(slug)
    flash("Silindi", "success")
    return redirect(url_for("admin.dashboard"))
