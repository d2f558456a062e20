import asyncio
import json
from typing import Optional

import typer

from ideaforge.factory import create_pipeline, create_plan_service, create_store
from ideaforge.models.idea import GenerationResult
from ideaforge.services.errors import CompletionError
from ideaforge.utils.logger import logger

app = typer.Typer(help="Turn a free-text concept into structured project ideas.")


def _print_result(result: GenerationResult, idea_ids):
    typer.echo(f"Keywords: {', '.join(result.keywords)}")
    if result.degraded:
        typer.echo(f"Note: some ideas are generic templates ({result.outcome.value})")
    for index, idea in enumerate(result.ideas, start=1):
        typer.echo("")
        typer.echo(f"{index}. {idea.title}")
        if index <= len(idea_ids):
            typer.echo(f"   id: {idea_ids[index - 1]}")
        typer.echo(f"   {idea.description}")
        typer.echo(f"   Market need: {idea.marketNeed}")
        typer.echo(f"   Tech stack: {', '.join(idea.techStack)}")
        typer.echo(f"   Difficulty: {idea.difficulty} ({idea.estimatedTime})")
        for source in idea.sources:
            typer.echo(f"   Source: {source.title or source.url} <{source.url}>")


def _require_store():
    store = create_store()
    if store is None:
        typer.echo("MONGO_URI is not configured", err=True)
        raise typer.Exit(code=1)
    return store


@app.command()
def generate(
    prompt: str,
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of ideas (1-5)"),
    owner: Optional[str] = typer.Option(None, "--owner", help="Store the ideas for this user id"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """
    Generate project ideas for PROMPT.
    """
    store = _require_store() if owner else None
    try:
        pipeline = create_pipeline(store=store)
        if owner:
            result, idea_ids = asyncio.run(pipeline.generate_and_save(prompt, owner, count))
        else:
            result, idea_ids = asyncio.run(pipeline.generate(prompt, count)), []
    finally:
        if store is not None:
            store.close()

    if as_json:
        payload = result.model_dump(mode="json")
        payload["ids"] = idea_ids
        typer.echo(json.dumps(payload, indent=2))
    else:
        _print_result(result, idea_ids)


@app.command()
def plan(idea_id: str):
    """
    Print the full plan for a stored idea, generating it on first request.
    """
    with _require_store() as store:
        plan_service = create_plan_service(store)
        try:
            text = asyncio.run(plan_service.expand_stored(idea_id))
        except CompletionError as e:
            logger.error(f"Plan generation failed: {e}")
            typer.echo(f"Could not generate a plan: {e}", err=True)
            raise typer.Exit(code=1)

    if text is None:
        typer.echo(f"Idea {idea_id} not found", err=True)
        raise typer.Exit(code=1)
    typer.echo(text)


@app.command()
def history(
    owner: str,
    limit: int = typer.Option(20, "--limit", help="Maximum ideas to list"),
    as_json: bool = typer.Option(False, "--json", help="Print the ideas as JSON"),
):
    """
    List the ideas stored for OWNER, newest first.
    """
    with _require_store() as store:
        ideas = store.fetch_ideas_by_owner(owner, limit=limit)

    if as_json:
        typer.echo(json.dumps(ideas, indent=2, default=str))
        return
    if not ideas:
        typer.echo(f"No ideas stored for {owner}")
        return
    for idea in ideas:
        plan_marker = " [plan]" if idea.get("plan") else ""
        typer.echo(f"{idea['id']}  {idea['title']}  ({idea.get('difficulty')}, {idea.get('likes', 0)} likes){plan_marker}")


if __name__ == "__main__":
    app()
