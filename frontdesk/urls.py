from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views, views_api
from .models import Rating

# ==============================================================================
# DRF ROUTER
# ==============================================================================
router = DefaultRouter()
router.register(r'tables', views_api.TableViewSet, basename='api-table')
router.register(r'reservations', views_api.ReservationViewSet, basename='api-reservation')
router.register(r'inventory/items', views_api.InventoryItemViewSet, basename='api-inventory-item')

# ==============================================================================
# URL PATTERNS
# ==============================================================================
app_name = 'frontdesk'

urlpatterns = [
    # --------------------------------------------------------------------------
    # AUTH
    # --------------------------------------------------------------------------
    path('login/', views.LoginView.as_view(), name='login'),
    path('logout/', views.LogoutView.as_view(), name='logout'),

    # --------------------------------------------------------------------------
    # DASHBOARDS / HOME
    # --------------------------------------------------------------------------
    path('', views.home, name='home'),
    path('dashboard/admin/', views.AdminDashboardView.as_view(), name='admin-dashboard'),
    path('dashboard/staff/', views.StaffDashboardView.as_view(), name='staff-dashboard'),
    path('dashboard/customer/', views.CustomerDashboardView.as_view(), name='customer-dashboard'),
    path('floor-plan/', views.FloorPlanView.as_view(), name='floor-plan'),

    # --------------------------------------------------------------------------
    # TABLES
    # --------------------------------------------------------------------------
    path('tables/', views.TableListView.as_view(), name='table-list'),
    path('tables/new/', views.TableCreateView.as_view(), name='table-create'),
    path('tables/available/', views.AvailableTablesView.as_view(), name='table-available'),
    path('tables/status/<str:status>/', views.TableListView.as_view(), name='table-by-status'),
    path('tables/<int:pk>/', views.TableDetailView.as_view(), name='table-detail'),
    path('tables/<int:pk>/status/', views.TableStatusView.as_view(), name='table-status'),

    # --------------------------------------------------------------------------
    # RESERVATIONS
    # --------------------------------------------------------------------------
    path('reservations/', views.ReservationListView.as_view(), name='reservation-list'),
    path('reservations/new/', views.ReservationCreateView.as_view(), name='reservation-create'),
    path('reservations/today/', views.TodayReservationsView.as_view(), name='reservation-today'),
    path('reservations/<int:pk>/', views.ReservationDetailView.as_view(), name='reservation-detail'),
    path('reservations/<int:pk>/status/', views.ReservationStatusView.as_view(), name='reservation-status'),
    path('reservations/<int:pk>/cancel/', views.ReservationCancelView.as_view(), name='reservation-cancel'),

    # --------------------------------------------------------------------------
    # STAFF
    # --------------------------------------------------------------------------
    path('staff/', views.StaffListView.as_view(), name='staff-list'),
    path('staff/new/', views.StaffCreateView.as_view(), name='staff-create'),
    path('staff/<int:pk>/', views.StaffDetailView.as_view(), name='staff-detail'),
    path('staff/<int:pk>/edit/', views.StaffEditView.as_view(), name='staff-edit'),
    path('staff/<int:pk>/toggle-status/', views.StaffToggleStatusView.as_view(), name='staff-toggle-status'),
    path('staff/<int:pk>/assign-table/', views.StaffAssignTableView.as_view(), name='staff-assign-table'),
    path('staff/<int:pk>/unassign-table/<int:table_pk>/', views.StaffUnassignTableView.as_view(),
         name='staff-unassign-table'),

    # --------------------------------------------------------------------------
    # TASKS
    # --------------------------------------------------------------------------
    path('tasks/', views.TaskListView.as_view(), name='task-list'),
    path('tasks/new/', views.TaskCreateView.as_view(), name='task-create'),
    path('tasks/<int:pk>/', views.TaskDetailView.as_view(), name='task-detail'),
    path('tasks/<int:pk>/edit/', views.TaskEditView.as_view(), name='task-edit'),
    path('tasks/<int:pk>/status/', views.TaskStatusView.as_view(), name='task-status'),
    path('tasks/<int:pk>/assign/', views.TaskAssignView.as_view(), name='task-assign'),
    path('tasks/<int:pk>/delete/', views.TaskDeleteView.as_view(), name='task-delete'),

    # --------------------------------------------------------------------------
    # INVENTORY
    # --------------------------------------------------------------------------
    path('inventory/', views.InventoryListView.as_view(), name='inventory-list'),
    path('inventory/new/', views.InventoryCreateView.as_view(), name='inventory-create'),
    path('inventory/low-stock/', views.InventoryListView.as_view(low_stock_only=True), name='inventory-low-stock'),
    path('inventory/<int:pk>/', views.InventoryDetailView.as_view(), name='inventory-detail'),
    path('inventory/<int:pk>/edit/', views.InventoryEditView.as_view(), name='inventory-edit'),
    path('inventory/<int:pk>/delete/', views.InventoryDeleteView.as_view(), name='inventory-delete'),
    path('inventory/<int:pk>/tx/', views.InventoryTransactionView.as_view(), name='inventory-transaction'),

    # --------------------------------------------------------------------------
    # RATINGS
    # --------------------------------------------------------------------------
    path('ratings/', views.RatingListView.as_view(), name='rating-list'),
    path('ratings/new/', views.RatingCreateView.as_view(), name='rating-create'),
    path('ratings/pending/', views.RatingListView.as_view(status=Rating.Status.PENDING), name='rating-pending'),
    path('ratings/approved/', views.RatingListView.as_view(status=Rating.Status.APPROVED), name='rating-approved'),
    path('ratings/<int:pk>/approve/', views.RatingModerateView.as_view(status=Rating.Status.APPROVED),
         name='rating-approve'),
    path('ratings/<int:pk>/reject/', views.RatingModerateView.as_view(status=Rating.Status.REJECTED),
         name='rating-reject'),

    # --------------------------------------------------------------------------
    # API
    # --------------------------------------------------------------------------
    path('api/v1/', include(router.urls)),
]
