from django.urls import path

from occupancy import views


urlpatterns = [
    path(
        "empty-tables-count",
        views.EmptyTablesCountView.as_view(),
        name="empty-tables-count",
    ),
    path(
        "busy-tables-count",
        views.BusyTablesCountView.as_view(),
        name="busy-tables-count",
    ),
    path(
        "all-table-counts",
        views.AllTableCountsView.as_view(),
        name="all-table-counts",
    ),
    path(
        "empty-tables",
        views.EmptyTablesView.as_view(),
        name="empty-tables",
    ),
    path(
        "busy-tables",
        views.BusyTablesView.as_view(),
        name="busy-tables",
    ),
    path(
        "assign-table",
        views.AssignTableView.as_view(),
        name="assign-table",
    ),
    path(
        "release-table",
        views.ReleaseTableView.as_view(),
        name="release-table",
    ),
    path(
        "resto-tables",
        views.TableOverviewView.as_view(),
        name="resto-tables",
    ),
]
