"""Sync menu: browse services, documents, lists, maps and their items."""

from __future__ import annotations

import typer

from ..core.client import Client
from ..core.exceptions import TwilioApiError
from ..resources.sync import (
    Service,
    SyncDocument,
    SyncList,
    SyncListItem,
    SyncMap,
    SyncMapItem,
    SyncService,
)
from .menus import DELETE, LIST_DETAILS, browse, confirm_and_delete
from .output import print_details
from .prompts import choose_action, prompt_text

DOCUMENTS = "Documents"
LISTS = "Lists"
MAPS = "Maps"
SERVICE_ACTIONS = [DOCUMENTS, LISTS, MAPS, LIST_DETAILS, DELETE]

GET_DOCUMENT = "Get Document"
LIST_DOCUMENTS = "List Documents"
LIST_ITEMS = "List Items"


def service_label(service: SyncService) -> str:
    return f"({service.sid}) {service.unique_name or service.friendly_name or ''}".rstrip()


def named_label(resource) -> str:
    return f"({resource.sid}) {resource.unique_name or ''}".rstrip()


async def choose_sync_resource(twilio: Client) -> None:
    typer.echo("Fetching Sync Services...")
    services = await twilio.sync.services.list()
    if not services:
        typer.echo("No Sync Services found.")
        return
    typer.echo(f"Found {len(services)} Sync Services.")

    async def manage(service: SyncService) -> bool:
        return await manage_sync_service(twilio.sync.service(service.sid), service)

    await browse(services, "Choose a Sync Service:", manage, render=service_label)


async def manage_sync_service(resource: Service, service: SyncService) -> bool:
    while True:
        action = choose_action(SERVICE_ACTIONS, "Select a resource:")
        if action is None:
            return False
        if action == DOCUMENTS:
            await choose_document_action(resource)
        elif action == LISTS:
            await choose_sync_list(resource)
        elif action == MAPS:
            await choose_sync_map(resource)
        elif action == LIST_DETAILS:
            print_details(service)
        elif action == DELETE:
            if await confirm_and_delete(
                "Are you sure you wish to delete the Sync Service?", "Sync Service", resource.delete
            ):
                return True


# Documents


async def choose_document_action(resource: Service) -> None:
    while True:
        action = choose_action([GET_DOCUMENT, LIST_DOCUMENTS])
        if action is None:
            return
        if action == GET_DOCUMENT:
            await get_document(resource)
        else:
            await list_documents(resource)


async def get_document(resource: Service) -> None:
    sid = prompt_text("Please provide a document SID (or unique name):", placeholder="ET...")
    if sid is None:
        return
    try:
        document = await resource.document(sid).get()
    except TwilioApiError as e:
        if e.not_found:
            typer.echo(f"A Document with SID '{sid}' was not found.")
            typer.echo()
            return
        raise
    await manage_document(resource, document)


async def list_documents(resource: Service) -> None:
    typer.echo("Fetching Documents...")
    documents = await resource.documents.list()
    if not documents:
        typer.echo("No Documents found.")
        typer.echo()
        return
    typer.echo(f"Found {len(documents)} Documents.")

    async def manage(document: SyncDocument) -> bool:
        return await manage_document(resource, document)

    await browse(documents, "Documents:", manage, render=named_label)


async def manage_document(resource: Service, document: SyncDocument) -> bool:
    while True:
        action = choose_action([LIST_DETAILS, DELETE])
        if action is None:
            return False
        if action == LIST_DETAILS:
            print_details(document)
        elif await confirm_and_delete(
            "Are you sure to wish to delete the Document?",
            "Document",
            resource.document(document.sid).delete,
        ):
            return True


# Lists


async def choose_sync_list(resource: Service) -> None:
    typer.echo("Fetching Sync Lists...")
    sync_lists = await resource.lists.list()
    if not sync_lists:
        typer.echo("No Sync Lists found.")
        return
    typer.echo(f"Found {len(sync_lists)} Sync Lists.")

    async def manage(sync_list: SyncList) -> bool:
        return await manage_sync_list(resource, sync_list)

    await browse(sync_lists, "Choose a Sync List:", manage, render=named_label)


async def manage_sync_list(resource: Service, sync_list: SyncList) -> bool:
    list_resource = resource.list(sync_list.sid)
    while True:
        action = choose_action([LIST_ITEMS, LIST_DETAILS, DELETE])
        if action is None:
            return False
        if action == LIST_ITEMS:
            await choose_sync_list_item(resource, sync_list)
        elif action == LIST_DETAILS:
            print_details(sync_list)
        elif await confirm_and_delete(
            "Are you sure you wish to delete the Sync List?", "Sync List", list_resource.delete
        ):
            return True


async def choose_sync_list_item(resource: Service, sync_list: SyncList) -> None:
    list_resource = resource.list(sync_list.sid)
    typer.echo("Fetching Sync List items...")
    items = await list_resource.items.list()
    if not items:
        typer.echo("No Sync List items found.")
        return
    typer.echo(f"Found {len(items)} Sync List items.")

    async def manage(item: SyncListItem) -> bool:
        while True:
            action = choose_action([LIST_DETAILS, DELETE])
            if action is None:
                return False
            if action == LIST_DETAILS:
                print_details(item)
            elif await confirm_and_delete(
                "Are you sure to wish to delete the Sync List item?",
                "Sync List item",
                list_resource.item(item.index).delete,
            ):
                return True

    await browse(items, "Choose a Sync List item:", manage)


# Maps


async def choose_sync_map(resource: Service) -> None:
    typer.echo("Fetching Sync Maps...")
    sync_maps = await resource.maps.list()
    if not sync_maps:
        typer.echo("No Sync Maps found.")
        return
    typer.echo(f"Found {len(sync_maps)} Sync Maps.")

    async def manage(sync_map: SyncMap) -> bool:
        return await manage_sync_map(resource, sync_map)

    await browse(sync_maps, "Choose a Sync Map:", manage, render=named_label)


async def manage_sync_map(resource: Service, sync_map: SyncMap) -> bool:
    map_resource = resource.map(sync_map.sid)
    while True:
        action = choose_action([LIST_ITEMS, LIST_DETAILS, DELETE])
        if action is None:
            return False
        if action == LIST_ITEMS:
            await choose_sync_map_item(resource, sync_map)
        elif action == LIST_DETAILS:
            print_details(sync_map)
        elif await confirm_and_delete(
            "Are you sure you wish to delete the Sync Map?", "Sync Map", map_resource.delete
        ):
            return True


async def choose_sync_map_item(resource: Service, sync_map: SyncMap) -> None:
    map_resource = resource.map(sync_map.sid)
    typer.echo("Fetching Sync Map items...")
    items = await map_resource.items.list()
    if not items:
        typer.echo("No Sync Map items found.")
        return
    typer.echo(f"Found {len(items)} Sync Map items.")

    async def manage(item: SyncMapItem) -> bool:
        while True:
            action = choose_action([LIST_DETAILS, DELETE])
            if action is None:
                return False
            if action == LIST_DETAILS:
                print_details(item)
            elif await confirm_and_delete(
                "Are you sure you wish to delete the Sync Map item?",
                "Sync Map item",
                map_resource.item(item.key).delete,
            ):
                return True

    await browse(items, "Choose a Sync Map item:", manage)
