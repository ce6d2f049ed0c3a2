"""Document commands: save, load, list, search, find, delete."""

from __future__ import annotations

import click

from .common import domain_errors, echo_json, parse_meta


@click.command()
@click.option("--title", required=True, help="Document title.")
@click.option("--content", default=None, help="Document text. Omit to use --file.")
@click.option("--file", "content_file", type=click.File("r", encoding="utf-8"), default=None, help="Read content from a file ('-' for stdin).")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable, order kept).")
@click.option("--meta", multiple=True, help="Metadata KEY=VALUE (repeatable; JSON values allowed).")
@click.option("--id", "doc_id", default=None, help="Existing id to overwrite.")
@click.option("--model", "model_name", default=None, help="Preprocessing model to apply.")
@click.pass_obj
def save(state, title, content, content_file, tags, meta, doc_id, model_name) -> None:
    """Save a document, optionally preprocessing it with a model."""
    from context_processor.store import DocumentDraft

    if content is None and content_file is None:
        raise click.UsageError("Provide --content or --file.")
    if content is None:
        content = content_file.read()

    store = state.get_store()
    with domain_errors():
        draft = DocumentDraft(title=title, content=content, tags=list(tags), metadata=parse_meta(meta), id=doc_id)
        doc = store.save(draft, model_name=model_name)
    echo_json(doc.to_dict())


@click.command()
@click.argument("doc_id")
@click.option("--related", is_flag=True, help="Also list documents sharing a tag.")
@click.pass_obj
def load(state, doc_id, related) -> None:
    """Print one document as JSON."""
    store = state.get_store()
    with domain_errors():
        doc = store.load(doc_id)
        if not related:
            echo_json(doc.to_dict())
            return
        echo_json({"document": doc.to_dict(), "related": [d.to_dict() for d in store.related(doc_id)]})


@click.command("list")
@click.option("--limit", type=click.IntRange(min=0), default=None)
@click.option("--offset", type=click.IntRange(min=0), default=0)
@click.pass_obj
def list_cmd(state, limit, offset) -> None:
    """List documents in creation order."""
    store = state.get_store()
    with domain_errors():
        docs = store.list(limit=limit, offset=offset)
        echo_json({"documents": [d.to_dict() for d in docs], "total": store.count()})


@click.command()
@click.option("--tag", "tags", multiple=True, help="Required tag (repeatable; all must match).")
@click.option("--limit", type=click.IntRange(min=0), default=None)
@click.option("--offset", type=click.IntRange(min=0), default=0)
@click.pass_obj
def search(state, tags, limit, offset) -> None:
    """Find documents carrying every given tag."""
    store = state.get_store()
    with domain_errors():
        docs = store.search(list(tags), limit=limit, offset=offset)
    echo_json({"documents": [d.to_dict() for d in docs], "count": len(docs)})


@click.command()
@click.argument("query")
@click.option("--limit", type=click.IntRange(min=0), default=None)
@click.option("--field", "fields", multiple=True, type=click.Choice(["title", "content"]), help="Restrict to a field.")
@click.pass_obj
def find(state, query, limit, fields) -> None:
    """Full-text search over titles and content."""
    store = state.get_store()
    with domain_errors():
        docs = store.find(query, limit=limit, fields=fields or ("title", "content"))
    echo_json({"documents": [d.to_dict() for d in docs], "count": len(docs)})


@click.command()
@click.argument("doc_id")
@click.pass_obj
def delete(state, doc_id) -> None:
    """Delete a document (no-op if it does not exist)."""
    store = state.get_store()
    with domain_errors():
        deleted = store.delete(doc_id)
    echo_json({"id": doc_id, "deleted": deleted})
