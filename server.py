"""Entry point: starts the MCP server thread and the pygame main loop."""

import os
# Suppress pygame welcome message before importing; it prints to stdout
# which would corrupt the MCP stdio JSON-RPC stream.
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import argparse
import logging
import queue
import sys
import threading

import pygame

from controller import PaintController
from state import DemoType, PaintFunction
from tools import create_mcp_server

logger = logging.getLogger("funcpaint")

WIDTH, HEIGHT = 1000, 700
TOOLBAR_H = 40
FPS = 60

# Toolbar colours
TB_BG = (15, 12, 41)
TB_BTN = (48, 43, 99)
TB_BTN_HOVER = (70, 64, 140)
TB_BTN_ACTIVE = (218, 27, 96)
TB_TEXT = (235, 235, 245)
HUD_BG = (20, 20, 40, 200)
HUD_ACCENT = (255, 138, 0)
HUD_DEMO = (96, 165, 250)
MUSE_BG = (0, 0, 0, 160)
MUSE_BORDER = (255, 0, 128)

BUTTONS = ("Save", "Undo", "Redo", "Clear", "Erase", "Muse")
BUTTON_W, BUTTON_H, BUTTON_GAP = 70, 26, 8


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="FuncPaint: paint by invoking functions.")
    parser.add_argument("--width", type=int, default=WIDTH, help="canvas width in pixels")
    parser.add_argument("--height", type=int, default=HEIGHT, help="canvas height in pixels")
    parser.add_argument("--fps", type=int, default=FPS, help="frame rate cap")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--no-mcp", action="store_true",
                        help="run the window without the MCP stdio server")
    return parser.parse_args(argv)


def setup_logging(level: str):
    # stdout belongs to the MCP transport
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run_mcp_server(mcp_server):
    """Target for the daemon thread; runs the MCP stdio server."""
    mcp_server.run(transport="stdio")


def _save_dialog_and_write(controller: PaintController):
    """Open a Tk file-save dialog (runs on main thread) and write the PNG."""
    import tkinter as tk
    from tkinter import filedialog
    root = tk.Tk()
    root.withdraw()
    path = filedialog.asksaveasfilename(
        defaultextension=".png",
        initialfile="funcpaint-cosmic.png",
        filetypes=[("PNG image", "*.png"), ("All files", "*.*")],
        title="Save canvas as…",
    )
    root.destroy()
    if path:
        controller.save(path)


def _handle_request(cmd: dict, controller: PaintController):
    """Process a request/response command from the MCP tool thread."""
    event: threading.Event = cmd["_event"]
    result: dict = cmd["_result"]
    try:
        result["data"] = controller.execute(cmd)
    except Exception as e:
        logger.exception("Request %s failed", cmd.get("action"))
        result["error"] = str(e)
    finally:
        event.set()


def _drain(command_queue: queue.Queue, controller: PaintController):
    while True:
        try:
            cmd = command_queue.get_nowait()
        except queue.Empty:
            break

        # Request/response bridge commands have an _event key
        if "_event" in cmd:
            _handle_request(cmd, controller)
        else:
            try:
                controller.execute(cmd)
            except Exception:
                logger.exception("Command error: %s", cmd.get("action"))


def _button_rects() -> dict[str, pygame.Rect]:
    rects = {}
    x = 10
    for name in BUTTONS:
        rects[name] = pygame.Rect(x, 7, BUTTON_W, BUTTON_H)
        x += BUTTON_W + BUTTON_GAP
    return rects


def _draw_toolbar(screen, font, controller: PaintController, buttons, mouse_pos):
    pygame.draw.rect(screen, TB_BG, (0, 0, screen.get_width(), TOOLBAR_H))
    for name, rect in buttons.items():
        active = ((name == "Erase" and controller.erasing)
                  or (name == "Muse" and controller.muse_loading))
        if active:
            color = TB_BTN_ACTIVE
        elif rect.collidepoint(mouse_pos):
            color = TB_BTN_HOVER
        else:
            color = TB_BTN
        pygame.draw.rect(screen, color, rect, border_radius=4)
        pygame.draw.rect(screen, TB_TEXT, rect, width=1, border_radius=4)
        text = "..." if name == "Muse" and controller.muse_loading else name
        label = font.render(text, True, TB_TEXT)
        screen.blit(label, label.get_rect(center=rect.center))


def _draw_hud(screen, font, controller: PaintController):
    prefix = font.render("fn: ", True, HUD_ACCENT)
    name = font.render(f"{controller.function.value}()", True, TB_TEXT)
    parts = [prefix, name]
    if controller.demo.mode != DemoType.NONE:
        parts.append(font.render(f"  [{controller.demo.mode.value.upper()}]", True, HUD_DEMO))

    width = sum(p.get_width() for p in parts) + 20
    height = max(p.get_height() for p in parts) + 10
    box = pygame.Surface((width, height), pygame.SRCALPHA)
    box.fill(HUD_BG)
    x = 10
    for part in parts:
        box.blit(part, (x, 5))
        x += part.get_width()
    screen.blit(box, (screen.get_width() - width - 12, TOOLBAR_H + 12))


def _draw_muse(screen, font, prompt: str) -> pygame.Rect:
    """Draw the muse prompt banner; returns the close button rect."""
    label = font.render(f'"{prompt}"', True, HUD_ACCENT)
    width, height = label.get_width() + 60, label.get_height() + 20
    box = pygame.Surface((width, height), pygame.SRCALPHA)
    box.fill(MUSE_BG)
    pygame.draw.rect(box, MUSE_BORDER, box.get_rect(), width=1, border_radius=12)
    box.blit(label, (20, 10))
    close = font.render("×", True, TB_TEXT)
    box.blit(close, (width - 25, 8))
    left = (screen.get_width() - width) // 2
    top = TOOLBAR_H + 30
    screen.blit(box, (left, top))
    return pygame.Rect(left + width - 30, top, 30, height)


def _press_button(name: str, controller: PaintController):
    if name == "Save":
        _save_dialog_and_write(controller)
    elif name == "Undo":
        controller.undo()
    elif name == "Redo":
        controller.redo()
    elif name == "Clear":
        controller.clear()
    elif name == "Erase":
        controller.execute({"action": "toggle_erase"})
    elif name == "Muse":
        controller.request_muse()


def _handle_key(event, controller: PaintController):
    ctrl = event.mod & pygame.KMOD_CTRL
    if ctrl and event.key == pygame.K_z:
        controller.undo()
    elif ctrl and event.key == pygame.K_y:
        controller.redo()
    elif event.key in (pygame.K_RIGHT, pygame.K_DOWN):
        controller.cycle_function(1)
    elif event.key in (pygame.K_LEFT, pygame.K_UP):
        controller.cycle_function(-1)
    elif event.key == pygame.K_ESCAPE:
        controller.set_demo_mode(DemoType.NONE)
    elif event.key == pygame.K_e:
        controller.execute({"action": "toggle_erase"})


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    # Shared command queue between MCP thread and pygame main thread
    command_queue = queue.Queue()

    if not args.no_mcp:
        mcp_server = create_mcp_server(command_queue)
        mcp_thread = threading.Thread(target=run_mcp_server, args=(mcp_server,), daemon=True)
        mcp_thread.start()

    # Initialize pygame on the main thread
    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height + TOOLBAR_H), pygame.RESIZABLE)
    pygame.display.set_caption("FuncPaint")
    clock = pygame.time.Clock()

    controller = PaintController(args.width, args.height)
    logger.info("FuncPaint ready: %dx%d, function %s", args.width, args.height,
                PaintFunction.DRAW_SPIRAL.value)

    font = pygame.font.SysFont(None, 24)
    buttons = _button_rects()
    muse_close = None
    pressed = False

    def canvas_pos(pos):
        return pos[0], pos[1] - TOOLBAR_H

    running = True
    while running:
        mouse_pos = pygame.mouse.get_pos()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                controller.resize(event.w, max(1, event.h - TOOLBAR_H))
            elif event.type == pygame.KEYDOWN:
                _handle_key(event, controller)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if muse_close is not None and muse_close.collidepoint(event.pos):
                    controller.execute({"action": "dismiss_muse"})
                    continue
                clicked = next((n for n, r in buttons.items() if r.collidepoint(event.pos)), None)
                if clicked is not None:
                    _press_button(clicked, controller)
                elif event.pos[1] >= TOOLBAR_H:
                    x, y = canvas_pos(event.pos)
                    pressed = True
                    controller.execute({"action": "pointer_down", "x": x, "y": y})
            elif event.type == pygame.MOUSEMOTION and pressed:
                x, y = canvas_pos(event.pos)
                controller.execute({"action": "pointer_move", "x": x, "y": y})
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and pressed:
                pressed = False
                x, y = canvas_pos(event.pos)
                controller.execute({"action": "pointer_up", "x": x, "y": y})
            elif event.type == pygame.WINDOWLEAVE and pressed:
                pressed = False
                x, y = canvas_pos(mouse_pos)
                controller.execute({"action": "pointer_leave", "x": x, "y": y})

        _drain(command_queue, controller)
        controller.update()

        # --- Render ---
        screen.fill((0, 0, 0))
        screen.blit(controller.canvas.surface, (0, TOOLBAR_H))
        _draw_toolbar(screen, font, controller, buttons, mouse_pos)
        _draw_hud(screen, font, controller)
        muse_close = _draw_muse(screen, font, controller.muse_prompt) if controller.muse_prompt else None
        pygame.display.flip()
        clock.tick(args.fps)

    controller.set_demo_mode(DemoType.NONE)
    pygame.quit()


if __name__ == "__main__":
    main()
