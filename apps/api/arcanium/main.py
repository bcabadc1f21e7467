"""FastAPI application for the Arcanium marketplace demo."""
from __future__ import annotations

import base64
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from .core.config import Settings, get_settings
from .data.catalog import CATALOG
from .models import PLACEHOLDER_IMAGE
from .repositories.records import RecordStore
from .routers import images as images_router
from .routers import marketplace as marketplace_router
from .services.errors import (
    DuplicateIdentifierError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from .services.session_store import SessionRegistry

logger = logging.getLogger(__name__)

HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"UTF-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\" />
    <title>Arcanium</title>
    <script src=\"https://cdn.tailwindcss.com\"></script>
</head>
<body class=\"min-h-screen bg-gradient-to-br from-purple-700 to-indigo-900 p-8 text-slate-900\">
    <div id=\"notice\" class=\"fixed inset-0 z-50 hidden items-center justify-center bg-black/50\">
        <div class=\"w-full max-w-md rounded-lg bg-white p-6 shadow-lg\">
            <div class=\"mb-4 flex items-center justify-between\">
                <h2 class=\"text-xl font-bold\">Warning</h2>
                <button data-dismiss class=\"text-slate-500 hover:text-slate-900\">&times;</button>
            </div>
            <p id=\"noticeText\" class=\"mb-4 text-slate-700\"></p>
            <button data-dismiss class=\"w-full rounded bg-slate-900 py-2 text-white\">Close</button>
        </div>
    </div>

    <main class=\"mx-auto max-w-6xl\">
        <section id=\"page-listings\" class=\"hidden\">
            <header class=\"mb-8 flex items-center justify-between\">
                <h1 class=\"text-3xl font-bold text-white\">Arcanium</h1>
                <div class=\"flex gap-4\">
                    <button data-navigate=\"listProperty\" class=\"rounded bg-white/90 px-4 py-2\">List a Property</button>
                    <button data-navigate=\"viewMortgages\" class=\"rounded bg-white/90 px-4 py-2\">View Mortgages</button>
                </div>
            </header>
            <div id=\"propertyGrid\" class=\"grid grid-cols-1 gap-6 md:grid-cols-2 lg:grid-cols-3\"></div>
        </section>

        <section id=\"page-createListing\" class=\"hidden\">
            <header class=\"mb-8\">
                <button data-navigate=\"back\" class=\"text-white\">&larr; Back to Listings</button>
            </header>
            <div class=\"mx-auto max-w-2xl rounded-lg bg-white p-6\">
                <h2 class=\"mb-4 text-2xl font-bold\">List Your Property</h2>
                <form id=\"propertyForm\" class=\"space-y-4\">
                    <label class=\"block\">Your Name<input name=\"name\" class=\"mt-1 w-full rounded border p-2\" /></label>
                    <label class=\"block\">Your Email<input name=\"email\" type=\"email\" class=\"mt-1 w-full rounded border p-2\" /></label>
                    <label class=\"block\">Property Address<input name=\"address\" required class=\"mt-1 w-full rounded border p-2\" /></label>
                    <label class=\"block\">Asking Price<input name=\"price\" type=\"number\" required class=\"mt-1 w-full rounded border p-2\" /></label>
                    <label class=\"block\">Property Description<textarea name=\"description\" class=\"mt-1 w-full rounded border p-2\"></textarea></label>
                    <div class=\"grid grid-cols-2 gap-4\">
                        <label class=\"block\">Bedrooms<input name=\"bedrooms\" type=\"number\" required class=\"mt-1 w-full rounded border p-2\" /></label>
                        <label class=\"block\">Bathrooms<input name=\"bathrooms\" type=\"number\" required class=\"mt-1 w-full rounded border p-2\" /></label>
                    </div>
                    <label class=\"block\">Square Footage<input name=\"sqft\" type=\"number\" required class=\"mt-1 w-full rounded border p-2\" /></label>
                    <label class=\"block\">Upload Image<input id=\"imageInput\" type=\"file\" accept=\"image/*\" class=\"mt-1 w-full\" /></label>
                    <input type=\"hidden\" name=\"image\" />
                    <img id=\"imagePreview\" alt=\"Property Preview\" class=\"h-48 w-full rounded-lg object-cover\" />
                    <p data-error class=\"text-sm text-red-600\"></p>
                    <button type=\"submit\" class=\"w-full rounded bg-purple-600 py-2 text-white\">List Property</button>
                </form>
            </div>
        </section>

        <section id=\"page-mortgageOffers\" class=\"hidden\">
            <header class=\"mb-8 flex items-center justify-between\">
                <button data-navigate=\"back\" class=\"text-white\">&larr; Back to Properties</button>
                <h1 class=\"text-3xl font-bold text-white\">Arcanium Mortgage Offers</h1>
                <button id=\"openMortgageForm\" class=\"rounded bg-white/90 px-4 py-2\">List Mortgage Offer</button>
            </header>
            <div id=\"offerGrid\" class=\"grid grid-cols-1 gap-6 md:grid-cols-2 lg:grid-cols-3\"></div>
        </section>
    </main>

    <dialog id=\"mortgageDialog\" class=\"w-full max-w-md rounded-lg p-6\">
        <h2 class=\"mb-4 text-xl font-bold\">List a Mortgage Offer</h2>
        <form id=\"mortgageForm\" class=\"space-y-3\">
            <label class=\"block\">Your Name<input name=\"name\" required class=\"mt-1 w-full rounded border p-2\" /></label>
            <label class=\"block\">Your Email<input name=\"email\" type=\"email\" class=\"mt-1 w-full rounded border p-2\" /></label>
            <label class=\"block\">Your Address<input name=\"address\" class=\"mt-1 w-full rounded border p-2\" /></label>
            <label class=\"block\">Your Wallet Address<input name=\"walletAddress\" required class=\"mt-1 w-full rounded border p-2\" /></label>
            <label class=\"block\">Maximum Loan Amount<input name=\"maxAmount\" type=\"number\" required class=\"mt-1 w-full rounded border p-2\" /></label>
            <label class=\"block\">Interest Rate (%)<input name=\"interestRate\" type=\"number\" step=\"0.1\" required class=\"mt-1 w-full rounded border p-2\" /></label>
            <label class=\"block\">Term (Years)<input name=\"term\" type=\"number\" required class=\"mt-1 w-full rounded border p-2\" /></label>
            <label class=\"block\">Total Collateral (%)<input name=\"totalCollateral\" type=\"number\" required class=\"mt-1 w-full rounded border p-2\" /></label>
            <label class=\"block\">Initial Collateral (%)<input name=\"initialCollateral\" type=\"number\" required class=\"mt-1 w-full rounded border p-2\" /></label>
            <p data-error class=\"text-sm text-red-600\"></p>
            <div class=\"flex justify-end gap-2\">
                <button type=\"button\" data-close class=\"rounded border px-4 py-2\">Cancel</button>
                <button type=\"submit\" class=\"rounded bg-purple-600 px-4 py-2 text-white\">List Offer</button>
            </div>
        </form>
    </dialog>

    <dialog id=\"actionDialog\" class=\"w-full max-w-md rounded-lg p-6\">
        <h2 id=\"actionTitle\" class=\"mb-1 text-xl font-bold\"></h2>
        <p id=\"actionDescription\" class=\"mb-4 text-sm text-slate-500\"></p>
        <form id=\"actionForm\" class=\"space-y-3\">
            <div id=\"actionFields\" class=\"space-y-3\"></div>
            <p data-error class=\"text-sm text-red-600\"></p>
            <div class=\"flex justify-end gap-2\">
                <button type=\"button\" data-close class=\"rounded border px-4 py-2\">Cancel</button>
                <button type=\"submit\" class=\"rounded bg-purple-600 px-4 py-2 text-white\">Submit</button>
            </div>
        </form>
    </dialog>

    <dialog id=\"detailDialog\" class=\"w-full max-w-lg rounded-lg p-6\">
        <h2 id=\"detailTitle\" class=\"mb-4 text-xl font-bold\"></h2>
        <div id=\"detailBody\" class=\"space-y-2 text-slate-700\"></div>
        <div class=\"mt-4 flex justify-end\">
            <button type=\"button\" data-close class=\"rounded border px-4 py-2\">Close</button>
        </div>
    </dialog>

    <div id=\"toast\" class=\"fixed bottom-6 right-6 hidden rounded bg-slate-900 px-4 py-3 text-white shadow-lg\"></div>

    <script>
        const SESSION_KEY = 'arcaniumSession';
        let sessionId = sessionStorage.getItem(SESSION_KEY);
        let currentView = null;
        let pendingAction = null;

        const NAME = ['name', 'Your Name', 'text', true];
        const EMAIL = ['email', 'Your Email', 'email', true];
        const ACTIONS = {
            buyNow: {
                title: 'Buy Now',
                description: 'Please fill out the form to proceed with your purchase.',
                fields: [NAME, EMAIL],
            },
            makeOffer: {
                title: 'Make an Offer',
                description: 'Please fill out the form to make an offer.',
                fields: [NAME, EMAIL, ['amount', 'Offer Amount', 'number', true]],
            },
            bookViewing: {
                title: 'Book a Viewing',
                description: 'Please fill out the form to book a viewing.',
                fields: [
                    NAME,
                    EMAIL,
                    ['date', 'Preferred Date', 'date', true],
                    ['time', 'Preferred Time', 'time', true],
                    ['message', 'Additional Message', 'textarea', false],
                ],
            },
            makeMortgageOffer: {
                title: 'Make an Offer',
                description: 'Please fill out the form to make an offer.',
                fields: [NAME, EMAIL, ['amount', 'Offer Amount', 'number', true], ['propertyId', 'Property ID', 'text', true]],
            },
            contactProvider: {
                title: 'Contact Provider',
                description: 'Send a message to the mortgage provider.',
                fields: [NAME, EMAIL, ['message', 'Message', 'textarea', true]],
            },
        };

        function escapeHtml(value) {
            return String(value ?? '').replace(/[&<>\"']/g, (ch) => ({
                '&': '&amp;', '<': '&lt;', '>': '&gt;', '\"': '&quot;', \"'\": '&#39;',
            }[ch]));
        }

        async function api(path, options = {}) {
            const headers = Object.assign({}, options.headers || {});
            if (sessionId) {
                headers['X-Session-Id'] = sessionId;
            }
            const response = await fetch(path, Object.assign({}, options, { headers }));
            const sessionHeader = response.headers.get('X-Session-Id');
            if (sessionHeader) {
                sessionId = sessionHeader;
                sessionStorage.setItem(SESSION_KEY, sessionHeader);
            }
            const body = await response.json();
            if (!response.ok) {
                throw body;
            }
            return body;
        }

        function postJson(path, payload) {
            return api(path, {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(payload),
            });
        }

        function showToast(message) {
            const toast = document.getElementById('toast');
            toast.textContent = message;
            toast.classList.remove('hidden');
            setTimeout(() => toast.classList.add('hidden'), 3000);
        }

        function showError(form, error) {
            const target = form.querySelector('[data-error]');
            target.textContent = (error && error.detail) ? error.detail : 'Something went wrong.';
        }

        function propertyCard(property) {
            return `
                <article class=\"overflow-hidden rounded-lg bg-white shadow\">
                    <img src=\"${escapeHtml(property.image)}\" alt=\"${escapeHtml(property.address)}\" class=\"h-48 w-full object-cover\" />
                    <div class=\"p-4\">
                        <h2 class=\"mb-2 text-xl font-semibold\">${escapeHtml(property.address)}</h2>
                        <p class=\"mb-2 text-2xl font-bold text-purple-600\">$${Number(property.price).toLocaleString()}</p>
                        <p class=\"mb-2 flex gap-4 text-slate-600\">
                            <span>${property.bedrooms} beds</span><span>${property.bathrooms} baths</span><span>${property.sqft} sqft</span>
                        </p>
                        <p class=\"mb-2 text-sm text-slate-600\">${escapeHtml(property.description)}</p>
                        <p class=\"text-sm text-slate-500\">ID: ${escapeHtml(property.id)}</p>
                    </div>
                    <div class=\"flex flex-wrap gap-2 p-4 pt-0\">
                        <button data-action=\"buyNow\" data-property=\"${escapeHtml(property.id)}\" class=\"rounded bg-purple-600 px-3 py-2 text-white\">Buy Now</button>
                        <button data-action=\"makeOffer\" data-property=\"${escapeHtml(property.id)}\" class=\"rounded border px-3 py-2\">Make an Offer</button>
                        <button data-action=\"bookViewing\" data-property=\"${escapeHtml(property.id)}\" class=\"rounded bg-slate-200 px-3 py-2\">Book a Viewing</button>
                        <button data-detail=\"${escapeHtml(property.id)}\" class=\"rounded border px-3 py-2\">More Info</button>
                    </div>
                </article>`;
        }

        function offerCard(offer) {
            return `
                <article class=\"rounded-lg bg-white p-4 shadow\">
                    <h2 class=\"mb-2 text-xl font-semibold\">${escapeHtml(offer.provider)}</h2>
                    <p class=\"mb-2 text-2xl font-bold text-purple-600\">Up to $${Number(offer.maxAmount).toLocaleString()}</p>
                    <div class=\"mb-2 space-y-1 text-slate-600\">
                        <p>Term: ${offer.term} years</p>
                        <p>Interest Rate: ${offer.interestRate}%</p>
                        <p>Total Collateral: ${offer.totalCollateral}%</p>
                        <p>Initial Collateral: ${offer.initialCollateral}%</p>
                    </div>
                    <p class=\"mb-4 break-all text-xs text-slate-500\">Wallet Address: ${escapeHtml(offer.walletAddress)}</p>
                    <div class=\"flex gap-2\">
                        <button data-action=\"makeMortgageOffer\" data-offer=\"${escapeHtml(offer.id)}\" class=\"rounded bg-purple-600 px-3 py-2 text-white\">Make an Offer</button>
                        <button data-action=\"contactProvider\" data-offer=\"${escapeHtml(offer.id)}\" class=\"rounded border px-3 py-2\">Contact Provider</button>
                    </div>
                </article>`;
        }

        function render(view) {
            currentView = view;
            const notice = document.getElementById('notice');
            notice.classList.toggle('hidden', !view.notice.visible);
            notice.classList.toggle('flex', view.notice.visible);
            document.getElementById('noticeText').textContent = view.notice.text || '';

            for (const page of ['listings', 'createListing', 'mortgageOffers']) {
                document.getElementById(`page-${page}`).classList.toggle('hidden', view.page !== page);
            }
            document.getElementById('propertyGrid').innerHTML = view.properties.map(propertyCard).join('');
            document.getElementById('offerGrid').innerHTML = view.mortgageOffers.map(offerCard).join('');
        }

        async function openDetail(propertyId) {
            try {
                const property = await api(`/api/properties/${encodeURIComponent(propertyId)}`);
                document.getElementById('detailTitle').textContent = property.address;
                document.getElementById('detailBody').innerHTML = `
                    <img src=\"${escapeHtml(property.image)}\" alt=\"${escapeHtml(property.address)}\" class=\"h-48 w-full rounded object-cover\" />
                    <p class=\"text-2xl font-bold text-purple-600\">$${Number(property.price).toLocaleString()}</p>
                    <p>${property.bedrooms} beds, ${property.bathrooms} baths, ${property.sqft} sqft</p>
                    <p>${escapeHtml(property.description)}</p>
                    <p class=\"text-sm text-slate-500\">ID: ${escapeHtml(property.id)}</p>`;
                document.getElementById('detailDialog').showModal();
            } catch (error) {
                showToast(error.detail || 'This property is no longer available.');
            }
        }

        function openAction(kind, context) {
            const definition = ACTIONS[kind];
            pendingAction = Object.assign({ kind }, context);
            document.getElementById('actionTitle').textContent = definition.title;
            document.getElementById('actionDescription').textContent = definition.description;
            document.getElementById('actionFields').innerHTML = definition.fields.map(([name, label, type, required]) => {
                const attrs = `name=\"${name}\" ${required ? 'required' : ''} class=\"mt-1 w-full rounded border p-2\"`;
                const control = type === 'textarea' ? `<textarea ${attrs}></textarea>` : `<input type=\"${type}\" ${attrs} />`;
                return `<label class=\"block\">${label}${control}</label>`;
            }).join('');
            const form = document.getElementById('actionForm');
            form.querySelector('[data-error]').textContent = '';
            document.getElementById('actionDialog').showModal();
        }

        async function submitAction(payload, form, dialog) {
            try {
                const result = await postJson('/api/actions', payload);
                form.reset();
                if (dialog) {
                    dialog.close();
                }
                render(result.view);
                showToast(result.message);
                return true;
            } catch (error) {
                showError(form, error);
                return false;
            }
        }

        document.addEventListener('click', async (event) => {
            const target = event.target.closest('button');
            if (!target) {
                return;
            }
            if (target.dataset.navigate) {
                try {
                    render(await postJson('/api/navigate', { action: target.dataset.navigate }));
                } catch (error) {
                    showToast(error.detail || 'Navigation failed.');
                }
            } else if (target.hasAttribute('data-dismiss')) {
                render(await api('/api/notice/dismiss', { method: 'POST' }));
            } else if (target.dataset.action) {
                const context = target.dataset.property
                    ? { propertyId: target.dataset.property }
                    : { offerId: target.dataset.offer };
                openAction(target.dataset.action, context);
            } else if (target.dataset.detail) {
                await openDetail(target.dataset.detail);
            } else if (target.hasAttribute('data-close')) {
                target.closest('dialog').close();
            } else if (target.id === 'openMortgageForm') {
                document.getElementById('mortgageDialog').showModal();
            }
        });

        document.getElementById('actionForm').addEventListener('submit', async (event) => {
            event.preventDefault();
            const form = event.currentTarget;
            const payload = Object.assign({}, pendingAction, Object.fromEntries(new FormData(form)));
            await submitAction(payload, form, document.getElementById('actionDialog'));
        });

        document.getElementById('mortgageForm').addEventListener('submit', async (event) => {
            event.preventDefault();
            const form = event.currentTarget;
            const payload = Object.assign({ kind: 'listMortgageOffer' }, Object.fromEntries(new FormData(form)));
            await submitAction(payload, form, document.getElementById('mortgageDialog'));
        });

        document.getElementById('propertyForm').addEventListener('submit', async (event) => {
            event.preventDefault();
            const form = event.currentTarget;
            const payload = Object.assign({ kind: 'listProperty' }, Object.fromEntries(new FormData(form)));
            if (await submitAction(payload, form, null)) {
                document.getElementById('imagePreview').removeAttribute('src');
            }
        });

        document.getElementById('imageInput').addEventListener('change', async (event) => {
            const file = event.target.files && event.target.files[0];
            if (!file) {
                return;
            }
            const body = new FormData();
            body.append('image', file);
            const form = document.getElementById('propertyForm');
            try {
                const result = await api('/api/images', { method: 'POST', body });
                form.elements.image.value = result.image;
                document.getElementById('imagePreview').src = result.image;
            } catch (error) {
                showError(form, error);
            }
        });

        api('/api/view').then(render).catch(() => showToast('Could not load listings.'));
    </script>
</body>
</html>
"""

FAVICON_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4nGMAAQAABQABDQottAAAAABJRU5ErkJggg=="
)

PLACEHOLDER_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="600" height="400" viewBox="0 0 600 400">
<rect width="600" height="400" fill="#e2e8f0"/>
<path d="M300 120 190 210h30v90h60v-60h40v60h60v-90h30z" fill="#94a3b8"/>
</svg>
"""


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("Rejected submission on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})


async def _duplicate_identifier(request: Request, exc: DuplicateIdentifierError) -> JSONResponse:
    logger.warning("Duplicate identifier %s on %s", exc.identifier, request.url.path)
    return JSONResponse(status_code=409, content={"detail": str(exc), "id": exc.identifier})


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc), "id": exc.identifier})


async def _invalid_transition(request: Request, exc: InvalidTransitionError) -> JSONResponse:
    logger.warning("Ignored navigation: %s", exc)
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "page": exc.page, "action": exc.action},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its own record store and session registry."""

    settings = settings or get_settings()
    logging.getLogger("arcanium").setLevel(settings.log_level.upper())

    app = FastAPI(title="Arcanium Marketplace Demo", version="0.1.0")

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Session-Id"],
        )

    store = RecordStore(identifier_width=settings.identifier_width)
    if settings.seed_demo_data:
        store.seed(CATALOG)

    app.state.settings = settings
    app.state.store = store
    app.state.sessions = SessionRegistry(store, settings)

    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(DuplicateIdentifierError, _duplicate_identifier)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(InvalidTransitionError, _invalid_transition)

    app.include_router(marketplace_router.router, prefix="/api", tags=["marketplace"])
    app.include_router(images_router.router, prefix="/api", tags=["images"])

    @app.get("/", response_class=HTMLResponse, tags=["meta"])
    async def index() -> HTMLResponse:
        """Serve the single-page marketplace UI."""

        return HTMLResponse(content=HTML_PAGE)

    @app.head("/", tags=["meta"])
    async def index_head() -> Response:
        """Fast health checks issue HEAD /; answer with 200 to avoid noisy 405s."""

        return Response(status_code=200)

    @app.get("/api/health", tags=["meta"])
    async def health() -> dict[str, str]:
        """Simple liveness probe."""

        return {"status": "ok"}

    @app.head("/api/health", tags=["meta"])
    async def health_head() -> Response:
        """Allow HEAD for uptime monitors that only need the status code."""

        return Response(status_code=200)

    @app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
    async def robots() -> PlainTextResponse:
        """Serve a minimal robots.txt to avoid 404 noise."""

        return PlainTextResponse("User-agent: *\nDisallow:")

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon() -> Response:
        """Return a tiny placeholder favicon."""

        return Response(content=FAVICON_BYTES, media_type="image/png")

    @app.get(PLACEHOLDER_IMAGE, include_in_schema=False)
    async def placeholder_image() -> Response:
        """Serve the image shown for listings without an upload."""

        return Response(content=PLACEHOLDER_SVG, media_type="image/svg+xml")

    return app


app = create_app()
